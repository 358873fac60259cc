from __future__ import annotations
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, Optional

from .grading import round_half_up

FAILING_GRADE = "F"


@dataclass(frozen=True)
class ExaminationStatistics:
	count: int
	average_raw_marks: Optional[float] = None
	average_percentage: Optional[float] = None
	min_raw_marks: Optional[float] = None
	max_raw_marks: Optional[float] = None
	min_percentage: Optional[float] = None
	max_percentage: Optional[float] = None
	pass_count: int = 0
	pass_rate: Optional[float] = None
	grade_distribution: Dict[str, int] = field(default_factory=dict)

	def as_dict(self) -> Dict[str, Any]:
		return asdict(self)


def summarize(grades: Iterable[Any]) -> ExaminationStatistics:
	"""Aggregate stored grade records (``raw_marks``, ``percentage``, ``letter_grade``).

	Uses the values as stored; nothing is re-classified here.
	"""
	rows = list(grades)
	if not rows:
		return ExaminationStatistics(count=0)

	raw = [float(g.raw_marks) for g in rows]
	pct = [float(g.percentage) for g in rows]
	distribution = Counter(g.letter_grade for g in rows)
	passed = sum(n for letter, n in distribution.items() if letter != FAILING_GRADE)
	count = len(rows)
	return ExaminationStatistics(
		count=count,
		average_raw_marks=round_half_up(sum(raw) / count),
		average_percentage=round_half_up(sum(pct) / count),
		min_raw_marks=min(raw),
		max_raw_marks=max(raw),
		min_percentage=min(pct),
		max_percentage=max(pct),
		pass_count=passed,
		pass_rate=round_half_up(passed / count * 100),
		grade_distribution=dict(sorted(distribution.items())),
	)
