"""
Grade classification.

Turns a raw examination score into a percentage, a letter grade and a
grade-point value. Two fixed scales exist: one for university examinations
and a standard one shared by Primary, O-Level and A-Level.

Every path that stores or previews a grade goes through ``classify`` so the
thresholds live in exactly one place.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, Tuple, Union


class AcademicLevel(str, Enum):
	PRIMARY = "PRIMARY"
	O_LEVEL = "O_LEVEL"
	A_LEVEL = "A_LEVEL"
	UNIVERSITY = "UNIVERSITY"


class GradingError(ValueError):
	"""Base class for classification failures."""

	kind = "GradingError"


class InvalidInput(GradingError):
	"""Marks outside ``[0, max_marks]`` or a non-positive maximum."""

	kind = "InvalidInput"


class UnknownLevel(GradingError):
	"""Academic level is not one of the recognised values."""

	kind = "UnknownLevel"


@dataclass(frozen=True)
class GradeBand:
	letter: str
	min_percentage: float
	points: float


@dataclass(frozen=True)
class GradeResult:
	percentage: float
	letter_grade: str
	grade_points: float

	def as_dict(self) -> Dict[str, float | str]:
		return {
			"percentage": self.percentage,
			"letter_grade": self.letter_grade,
			"grade_points": self.grade_points,
		}


# Descending, inclusive lower bounds. The last band must start at 0.
UNIVERSITY_SCALE: Tuple[GradeBand, ...] = (
	GradeBand("A+", 90, 4.0),
	GradeBand("A", 80, 3.7),
	GradeBand("B+", 75, 3.3),
	GradeBand("B", 70, 3.0),
	GradeBand("C+", 65, 2.7),
	GradeBand("C", 60, 2.3),
	GradeBand("D", 50, 2.0),
	GradeBand("F", 0, 0.0),
)

STANDARD_SCALE: Tuple[GradeBand, ...] = (
	GradeBand("A", 80, 7.0),
	GradeBand("B", 60, 5.0),
	GradeBand("C", 40, 3.0),
	GradeBand("D", 20, 1.0),
	GradeBand("F", 0, 0.0),
)

# Primary, O-Level and A-Level currently share one scale.
SCALES: Dict[AcademicLevel, Tuple[GradeBand, ...]] = {
	AcademicLevel.PRIMARY: STANDARD_SCALE,
	AcademicLevel.O_LEVEL: STANDARD_SCALE,
	AcademicLevel.A_LEVEL: STANDARD_SCALE,
	AcademicLevel.UNIVERSITY: UNIVERSITY_SCALE,
}

_TWO_PLACES = Decimal("0.01")

Number = Union[int, float]


def parse_level(academic_level: Union[AcademicLevel, str]) -> AcademicLevel:
	"""
	Accept an ``AcademicLevel`` member or its name. Names match case-insensitively
	and ignore surrounding whitespace, so ``" o_level "`` is ``O_LEVEL``. Anything
	else, including non-strings, raises ``UnknownLevel``.
	"""
	if isinstance(academic_level, AcademicLevel):
		return academic_level
	if isinstance(academic_level, str):
		try:
			return AcademicLevel(academic_level.strip().upper())
		except ValueError:
			pass
	raise UnknownLevel(f"Unknown academic level: {academic_level!r}")


def scale_for(academic_level: Union[AcademicLevel, str]) -> Tuple[GradeBand, ...]:
	return SCALES[parse_level(academic_level)]


def _as_finite_number(value, name: str) -> float:
	# bool is an int subclass; True/False are never marks
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		raise InvalidInput(f"{name} must be a number, got {value!r}")
	if not math.isfinite(value):
		raise InvalidInput(f"{name} must be finite, got {value!r}")
	return float(value)


def round_half_up(value: float) -> float:
	"""Round half-up to two decimal places."""
	return float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def classify(raw_marks: Number, max_marks: Number, academic_level: Union[AcademicLevel, str]) -> GradeResult:
	"""
	Classify a raw score.

	Args:
		raw_marks: Marks obtained, ``0 <= raw_marks <= max_marks``.
		max_marks: Maximum achievable marks, ``> 0``.
		academic_level: An ``AcademicLevel`` or its name.

	Returns:
		GradeResult with the percentage rounded to 2 decimals and the band
		matched top-down on that rounded percentage.

	Raises:
		UnknownLevel: academic_level is not recognised.
		InvalidInput: max_marks is not positive or raw_marks is out of range.
	"""
	level = parse_level(academic_level)
	maximum = _as_finite_number(max_marks, "max_marks")
	raw = _as_finite_number(raw_marks, "raw_marks")
	if maximum <= 0:
		raise InvalidInput(f"max_marks must be greater than 0, got {max_marks!r}")
	if raw < 0 or raw > maximum:
		raise InvalidInput(f"raw_marks must be between 0 and {max_marks}, got {raw_marks!r}")

	percentage = round_half_up(raw / maximum * 100)
	for band in SCALES[level]:
		if percentage >= band.min_percentage:
			return GradeResult(percentage=percentage, letter_grade=band.letter, grade_points=band.points)
	# Unreachable while every scale ends with a 0 lower bound
	raise InvalidInput(f"No grade band matches {percentage}")
