"""Decoding of a single spreadsheet cell into question text, choices and answer.

A cell holds one question written over several lines. The number of
non-empty lines decides the shape:

    2 lines  question / answer                          Short Answer
    5 lines  question / 1) 2) 3) ranked options / answer Short Answer
    6 lines  question / W) X) Y) Z) choices / answer     Multiple Choice

Anything else is rejected. Results are returned as values rather than raised
so callers can tell a rejected cell from a decoded one and see why.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union

from tsbapp.presentation.schemas.question_schema import QuestionType

logger = logging.getLogger(__name__)

ANSWER_PREFIX = re.compile(r"^ans(?:wer)?\s*:\s*", re.IGNORECASE)

RANKED_LABELS = ("1", "2", "3")
CHOICE_LABELS = ("W", "X", "Y", "Z")


class CellKind(str, Enum):
    SHORT_ANSWER = "short_answer"
    SHORT_ANSWER_RANKED = "short_answer_ranked"
    MULTIPLE_CHOICE = "multiple_choice"

    @property
    def question_type(self) -> QuestionType:
        if self is CellKind.MULTIPLE_CHOICE:
            return QuestionType.MULTIPLE_CHOICE
        return QuestionType.SHORT_ANSWER


@dataclass(frozen=True)
class ParsedCell:
    kind: CellKind
    question: str
    answer: str
    choices: Tuple[str, ...] = ()
    # option lines whose label did not match and were left out of choices
    dropped: Tuple[str, ...] = field(default=())


@dataclass(frozen=True)
class RejectedCell:
    reason: str


CellResult = Union[ParsedCell, RejectedCell]


def strip_outer_quotes(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


def split_lines(text: str):
    return [line.strip() for line in text.splitlines() if line.strip()]


def strip_answer_prefix(line: str) -> str:
    return ANSWER_PREFIX.sub("", line, count=1).strip()


def _take_labelled(lines, labels):
    """Strip ``label)`` prefixes; lines with the wrong label are dropped."""
    kept, dropped = [], []
    for line, label in zip(lines, labels):
        match = re.match(rf"^{re.escape(label)}\)\s*", line, re.IGNORECASE)
        if match:
            kept.append(line[match.end():].strip())
        else:
            logger.warning(f"Expected option label '{label})' but found: {line!r}")
            dropped.append(line)
    return tuple(kept), tuple(dropped)


def decode_cell(text: str) -> CellResult:
    if text is None:
        return RejectedCell("empty cell")
    lines = split_lines(strip_outer_quotes(text))
    if not lines:
        return RejectedCell("empty cell")

    count = len(lines)
    if count == 2:
        kind, choices, dropped = CellKind.SHORT_ANSWER, (), ()
    elif count == 5:
        kind = CellKind.SHORT_ANSWER_RANKED
        choices, dropped = _take_labelled(lines[1:4], RANKED_LABELS)
    elif count == 6:
        kind = CellKind.MULTIPLE_CHOICE
        choices, dropped = _take_labelled(lines[1:5], CHOICE_LABELS)
    else:
        return RejectedCell(f"expected 2, 5 or 6 non-empty lines, got {count}")

    question = lines[0]
    answer = strip_answer_prefix(lines[-1])
    if not question:
        return RejectedCell("missing question text")
    if not answer:
        return RejectedCell("missing answer")
    return ParsedCell(kind=kind, question=question, answer=answer, choices=choices, dropped=dropped)
