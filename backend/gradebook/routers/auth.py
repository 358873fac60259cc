import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Tuple

from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
import logging

from ..settings import settings
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AuthUser, AuthSession

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)
logging.getLogger('passlib').setLevel(logging.ERROR)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")



class Token(BaseModel):
	access_token: str
	token_type: str = "bearer"


class User(BaseModel):
	username: str
	tenant_id: str


# username -> (password hash, tenant id)
_users: Dict[str, Tuple[str, str]] = {}


def _ensure_seed_user() -> None:
	username = settings.seed_username
	password = settings.seed_password_plain
	if username and password and username not in _users:
		_users[username] = (pwd_context.hash(password), settings.seed_tenant_id)


def verify_password(plain_password: str, hashed_password: str) -> bool:
	return pwd_context.verify(plain_password, hashed_password)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
	# Try DB-backed users first
	user_row = db.query(AuthUser).filter(AuthUser.username == username).first()
	if user_row and verify_password(password, user_row.password_hash):
		return User(username=username, tenant_id=user_row.tenant_id)
	# Fallback to seed in-memory user for dev convenience
	_ensure_seed_user()
	seeded = _users.get(username)
	if seeded and verify_password(password, seeded[0]):
		return User(username=username, tenant_id=seeded[1])
	return None


def _resolve_expiry(expires_delta: Optional[timedelta]) -> datetime:
	delta = expires_delta
	if delta is None:
		minutes = getattr(settings, "access_token_expire_minutes", None)
		if isinstance(minutes, int) and minutes > 0:
			delta = timedelta(minutes=minutes)
		else:
			delta = timedelta(days=30)
	return datetime.now(timezone.utc) + delta


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
	to_encode = data.copy()
	expire = _resolve_expiry(expires_delta)
	to_encode.update({"exp": expire})
	encoded_jwt = jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
	return encoded_jwt


@router.post("/token", response_model=Token)
async def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
	user = authenticate_user(db, form_data.username, form_data.password)
	if not user:
		raise HTTPException(status_code=401, detail="Incorrect username or password")
	# Create a new session id (jti) and persist server-side
	session_id = uuid.uuid4().hex
	access_token = create_access_token({"sub": user.username, "tid": user.tenant_id, "jti": session_id})
	try:
		db.merge(AuthSession(session_id=session_id, username=user.username))
		db.commit()
	except Exception:
		db.rollback()
		logger.exception("Failed to persist session for %s", user.username)
		raise HTTPException(status_code=500, detail="Could not create session")
	return Token(access_token=access_token)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
	credentials_exception = HTTPException(
		status_code=401,
		detail="Could not validate credentials",
		headers={"WWW-Authenticate": "Bearer"},
	)
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
		username: str | None = payload.get("sub")
		tenant_id: str | None = payload.get("tid")
		jti: str | None = payload.get("jti")
		if username is None or tenant_id is None or jti is None:
			raise credentials_exception
	except JWTError:
		raise credentials_exception
	# The session row must still exist (revocation = deleting it)
	try:
		row = db.get(AuthSession, jti)
		if not row or row.username != username:
			raise credentials_exception
		row.last_activity_at = datetime.utcnow()
		db.add(row)
		db.commit()
	except HTTPException:
		raise
	except Exception:
		# On DB errors, fail closed
		db.rollback()
		logger.exception("Session lookup failed")
		raise credentials_exception
	return User(username=username, tenant_id=tenant_id)


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)):
	return user


@router.post("/logout")
async def logout(token: str = Depends(oauth2_scheme), user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
	row = db.get(AuthSession, payload.get("jti"))
	if row:
		db.delete(row)
		db.commit()
	return {"success": True}


class RegisterRequest(BaseModel):
	username: str
	password: str
	email: str
	tenant_id: str


@router.post("/register", status_code=201)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
	username = (req.username or "").strip()
	password = req.password or ""
	email = (req.email or "").strip()
	tenant_id = (req.tenant_id or "").strip()
	if not username or not password:
		raise HTTPException(status_code=400, detail="username and password are required")
	if not email:
		raise HTTPException(status_code=400, detail="email is required")
	if not tenant_id:
		raise HTTPException(status_code=400, detail="tenant_id is required")
	if len(username) < 3 or len(username) > 128:
		raise HTTPException(status_code=400, detail="username must be 3-128 characters")
	# Check exists
	existing = db.query(AuthUser).filter(AuthUser.username == username).first()
	if existing:
		raise HTTPException(status_code=409, detail="username already exists")
	row = AuthUser(username=username, password_hash=pwd_context.hash(password), email=email, tenant_id=tenant_id)
	db.add(row)
	db.commit()
	logger.info("Registered user %s for tenant %s", username, tenant_id)
	return {"success": True}
