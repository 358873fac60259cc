from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# Auth configuration
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=120, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
	# Seed user (development only); lives in memory, not in auth_users
	seed_username: str | None = Field(default=None, validation_alias="SEED_USERNAME")
	seed_password_plain: str | None = Field(default=None, validation_alias="SEED_PASSWORD")
	seed_tenant_id: str = Field(default="default", validation_alias="SEED_TENANT_ID")

	# Sessions idle for longer than this are purged by the cleanup watcher
	session_retention_days: int = Field(default=7, validation_alias="SESSION_RETENTION_DAYS")

	# Grade listing pagination
	default_page_limit: int = Field(default=10, validation_alias="DEFAULT_PAGE_LIMIT")
	max_page_limit: int = Field(default=100, validation_alias="MAX_PAGE_LIMIT")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	# Include exception text in 500 responses (development)
	expose_error_details: bool = Field(default=False, validation_alias="EXPOSE_ERROR_DETAILS")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
