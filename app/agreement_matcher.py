# app/agreement_matcher.py
"""
Cross-reference parsed courses against the transfer agreement table.

match_agreements() is the join itself; evaluate_matches() wraps it with the
states the UI renders:

    UNCOMPUTED  no summary yet, or the table is still loading
    BLOCKED     the table failed to load; matching is not attempted
    NO_COURSES  the summary lists no passed courses
    EMPTY       courses found, but no agreement covers them
    MATCHED     one or more agreements found
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from agreements import AGREEMENT_COLUMNS, AgreementTable, TableStatus, records_to_frame
from summary_parser import ParsedCourse, parse_passed_courses

logger = logging.getLogger(__name__)

SUBJECT_COL = "SndrSubjectCode"
NUMBER_COL = "SndrCourseNumber"


class MatchState(Enum):
    UNCOMPUTED = "uncomputed"
    BLOCKED = "blocked"
    NO_COURSES = "no_courses"
    EMPTY = "empty"
    MATCHED = "matched"


TableLike = Union[AgreementTable, pd.DataFrame, Sequence[dict], None]


def _normalize(col: pd.Series) -> pd.Series:
    return col.fillna("").astype(str).str.strip().str.upper()


def _as_frame(table: TableLike) -> Optional[pd.DataFrame]:
    """None means the table is not usable (missing, loading or failed)."""
    if table is None:
        return None
    if isinstance(table, AgreementTable):
        return table.frame if table.is_loaded else None
    if isinstance(table, pd.DataFrame):
        return table
    return records_to_frame(list(table))


def build_agreement_index(df: pd.DataFrame) -> Dict[Tuple[str, str], List[int]]:
    """
    Map normalized (subject, number) -> row positions in table order.

    Rows with a blank subject or number are left out.
    """
    if df.empty or SUBJECT_COL not in df.columns or NUMBER_COL not in df.columns:
        return {}

    subjects = _normalize(df[SUBJECT_COL])
    numbers = _normalize(df[NUMBER_COL])

    index: Dict[Tuple[str, str], List[int]] = {}
    for pos, (subj, num) in enumerate(zip(subjects, numbers)):
        if not subj or not num:
            continue
        index.setdefault((subj, num), []).append(pos)
    return index


def match_agreements(
    courses: Iterable[ParsedCourse],
    table: TableLike,
) -> Union[pd.DataFrame, MatchState]:
    """
    Return the agreement rows whose sender subject+number equals a parsed
    course, or MatchState.BLOCKED when the table is not available.

    Rows come out grouped per course, in course order, each group in table
    order. A course listed twice contributes its group twice.
    """
    df = _as_frame(table)
    if df is None:
        return MatchState.BLOCKED

    courses = list(courses)
    index = build_agreement_index(df) if courses else {}

    positions: List[int] = []
    for course in courses:
        positions.extend(index.get(course.key, []))

    matches = df.iloc[positions].reset_index(drop=True)
    logger.debug("Matched %d agreement(s) for %d course(s)", len(matches), len(courses))
    return matches


@dataclass
class MatchOutcome:
    state: MatchState
    courses: List[ParsedCourse] = field(default_factory=list)
    matches: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=AGREEMENT_COLUMNS))

    @property
    def is_blocked(self) -> bool:
        return self.state is MatchState.BLOCKED

    def records(self) -> List[dict]:
        return self.matches.to_dict("records")


def evaluate_matches(summary: Optional[str], table: Optional[AgreementTable]) -> MatchOutcome:
    """
    Run the join only once both inputs are present and the table is loaded.
    """
    if not summary:
        return MatchOutcome(MatchState.UNCOMPUTED)
    if table is None or table.status is TableStatus.LOADING:
        return MatchOutcome(MatchState.UNCOMPUTED)

    courses = parse_passed_courses(summary)
    if table.status is TableStatus.FAILED:
        return MatchOutcome(MatchState.BLOCKED, courses=courses)
    if not courses:
        return MatchOutcome(MatchState.NO_COURSES)

    result = match_agreements(courses, table)
    if isinstance(result, MatchState):
        return MatchOutcome(result, courses=courses)
    if result.empty:
        return MatchOutcome(MatchState.EMPTY, courses=courses, matches=result)
    return MatchOutcome(MatchState.MATCHED, courses=courses, matches=result)
