# app/summary_parser.py
"""
Pull the passed courses out of an AI-generated transcript summary.

The summary is expected to open with a bullet list such as

    - MATH 101: A+
    - ENGL 2XX: B
    * CHEM 110L: 87%

followed by free prose. Only bullet lines of that shape are read; everything
else (prose, blank lines, withdrawn "W" courses) is ignored.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

# A[+-] | B-D, F, P [+-] | 0-999 [%]. "W" and lowercase grades never match;
# trailing punctuation after the grade is fine, trailing letters or digits are not.
GRADE_PATTERN = r"(?:A|[B-DFP])[+-]?|\d{1,3}%?"

SUMMARY_LINE_RE = re.compile(
    r"^\s*[*-]\s*"
    r"(?:\*\*)?"
    r"(?P<subject>[A-Za-z]{2,6})\s+(?P<number>[A-Za-z0-9]{3,5})"
    r"(?:\*\*)?"
    r"\s*:\s*(?:\*\*\s*)?"
    r"(?P<grade>" + GRADE_PATTERN + r")"
    r"(?:\*\*)?(?![A-Za-z0-9])"
)


@dataclass(frozen=True)
class ParsedCourse:
    """
    One course the summary reports as passed.

    subject/number are stored trimmed and upper-cased so that equality is
    case- and whitespace-insensitive.
    """

    subject: str
    number: str
    grade: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "subject", self.subject.strip().upper())
        object.__setattr__(self, "number", self.number.strip().upper())

    @property
    def key(self) -> tuple[str, str]:
        return self.subject, self.number

    @property
    def code(self) -> str:
        return f"{self.subject} {self.number}"


def parse_summary_line(line: str) -> Optional[ParsedCourse]:
    m = SUMMARY_LINE_RE.match(line)
    if not m:
        return None
    return ParsedCourse(m.group("subject"), m.group("number"), m.group("grade"))


def parse_passed_courses(summary: Optional[str]) -> List[ParsedCourse]:
    """
    Return one ParsedCourse per matching line, in input order.

    Duplicates are kept; collapsing repeated attempts is left to the prompt
    that produced the summary.
    """
    if not summary:
        return []

    courses: List[ParsedCourse] = []
    for line in summary.splitlines():
        course = parse_summary_line(line)
        if course is not None:
            courses.append(course)
    return courses
