import pytest

from gradebook.grading import (
	AcademicLevel,
	GradeResult,
	GradingError,
	InvalidInput,
	STANDARD_SCALE,
	UnknownLevel,
	classify,
	parse_level,
	round_half_up,
	scale_for,
)

STANDARD_LEVELS = ["PRIMARY", "O_LEVEL", "A_LEVEL"]
STANDARD_LETTERS = {"A", "B", "C", "D", "F"}
UNIVERSITY_LETTERS = {"A+", "A", "B+", "B", "C+", "C", "D", "F"}


@pytest.mark.parametrize(
	"raw, expected",
	[
		(80, (80.0, "A", 7)),
		(100, (100.0, "A", 7)),
		(79, (79.0, "B", 5)),
		(60, (60.0, "B", 5)),
		(59, (59.0, "C", 3)),
		(40, (40.0, "C", 3)),
		(39, (39.0, "D", 1)),
		(20, (20.0, "D", 1)),
		(19, (19.0, "F", 0)),
		(0, (0.0, "F", 0)),
	],
)
def test_standard_scale_boundaries(raw, expected):
	result = classify(raw, 100, "O_LEVEL")
	assert (result.percentage, result.letter_grade, result.grade_points) == expected


@pytest.mark.parametrize(
	"raw, expected",
	[
		(100, (100.0, "A+", 4.0)),
		(90, (90.0, "A+", 4.0)),
		(89, (89.0, "A", 3.7)),
		(80, (80.0, "A", 3.7)),
		(79, (79.0, "B+", 3.3)),
		(75, (75.0, "B+", 3.3)),
		(74, (74.0, "B", 3.0)),
		(70, (70.0, "B", 3.0)),
		(69, (69.0, "C+", 2.7)),
		(65, (65.0, "C+", 2.7)),
		(64, (64.0, "C", 2.3)),
		(60, (60.0, "C", 2.3)),
		(59, (59.0, "D", 2.0)),
		(50, (50.0, "D", 2.0)),
		(49, (49.0, "F", 0)),
		(0, (0.0, "F", 0)),
	],
)
def test_university_scale_boundaries(raw, expected):
	result = classify(raw, 100, AcademicLevel.UNIVERSITY)
	assert (result.percentage, result.letter_grade, result.grade_points) == expected


@pytest.mark.parametrize("level", STANDARD_LEVELS)
def test_standard_levels_share_one_scale(level):
	assert scale_for(level) is STANDARD_SCALE
	assert classify(80, 100, level) == GradeResult(80.0, "A", 7.0)


def test_percentage_uses_max_marks():
	result = classify(33, 40, "A_LEVEL")
	assert result.percentage == 82.5
	assert result.letter_grade == "A"


def test_percentage_rounded_to_two_places():
	assert classify(1, 3, "PRIMARY").percentage == 33.33
	assert classify(2, 3, "PRIMARY").percentage == 66.67


def test_band_matched_on_rounded_percentage():
	# 79.996% rounds to 80.00 and lands in the higher band
	result = classify(79.996, 100, "O_LEVEL")
	assert result.percentage == 80.0
	assert result.letter_grade == "A"


def test_round_half_up():
	assert round_half_up(2.675) == 2.68
	assert round_half_up(0.125) == 0.13
	assert round_half_up(10.0) == 10.0


@pytest.mark.parametrize(
	"raw, maximum",
	[
		(101, 100),
		(-1, 100),
		(50, 0),
		(0, 0),
		(50, -10),
		(float("nan"), 100),
		(50, float("inf")),
		(True, 100),
		("50", 100),
		(None, 100),
	],
)
def test_invalid_input(raw, maximum):
	with pytest.raises(InvalidInput):
		classify(raw, maximum, "O_LEVEL")


@pytest.mark.parametrize("level", ["UNKNOWN", "", "college", None, 3])
def test_unknown_level(level):
	with pytest.raises(UnknownLevel):
		classify(50, 100, level)


def test_level_names_are_case_insensitive():
	assert classify(90, 100, " university ").letter_grade == "A+"


def test_parse_level_accepts_members_and_names():
	assert parse_level(AcademicLevel.A_LEVEL) is AcademicLevel.A_LEVEL
	assert parse_level(" o_level ") is AcademicLevel.O_LEVEL
	for bad in ("O-LEVEL", "", None, 3):
		with pytest.raises(UnknownLevel):
			parse_level(bad)


def test_errors_share_a_value_error_base():
	with pytest.raises(GradingError) as excinfo:
		classify(101, 100, "O_LEVEL")
	assert isinstance(excinfo.value, ValueError)
	assert excinfo.value.kind == "InvalidInput"
	with pytest.raises(GradingError) as excinfo:
		classify(50, 100, "UNKNOWN")
	assert excinfo.value.kind == "UnknownLevel"


@pytest.mark.parametrize("maximum", [1, 7, 40, 100, 150])
@pytest.mark.parametrize("level", STANDARD_LEVELS + ["UNIVERSITY"])
def test_properties_over_every_mark(level, maximum):
	letters = UNIVERSITY_LETTERS if level == "UNIVERSITY" else STANDARD_LETTERS
	steps = [maximum * i / 200 for i in range(201)]
	previous_points = None
	for raw in steps:
		result = classify(raw, maximum, level)
		assert result.percentage == round_half_up(raw / maximum * 100)
		assert 0 <= result.percentage <= 100
		assert result.letter_grade in letters
		if previous_points is not None:
			assert result.grade_points >= previous_points
		previous_points = result.grade_points


def test_identical_inputs_give_identical_results():
	first = classify(67.5, 90, "UNIVERSITY")
	second = classify(67.5, 90, "UNIVERSITY")
	assert first == second
	assert first.as_dict() == second.as_dict()
