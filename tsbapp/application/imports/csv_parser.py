"""Turns a round-by-slot spreadsheet export into question drafts.

Layout of the sheet::

    <ignored>, T1 Question, B1 Question, ..., <replacement tossup>, <replacement bonus>
    RR1,       "cell",      "cell",      ..., "cell",               "cell"
    DE3,       ...

Rows whose first column is not a known round code are skipped, as are
columns whose header is not a ``T<n> Question`` / ``B<n> Question`` slot
header. Bad cells are logged and left out; only an unreadable file fails
the whole import.
"""
import io
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from tsbapp.application.rounds import lookup_round_code
from tsbapp.errors import CsvFormatError
from tsbapp.presentation.schemas.question_schema import QuestionRole
from .cell_parser import ParsedCell, decode_cell

logger = logging.getLogger(__name__)

SLOT_HEADER = re.compile(r"^\s*([TB])\s*(\d+)\s+Question\s*$", re.IGNORECASE)
REPLACEMENT_NUMBER = 6
PREVIEW_LIMIT = 3
QUOTE = '"'
DELIMITER = ","
_FIELD_END = ("", DELIMITER, "\n", "\r")


@dataclass
class QuestionDraft:
    subject: Optional[str]
    round: int
    round_code: str
    question_type: str
    question_role: str
    question_number: int
    question: str
    answer: str
    choices: List[str] = field(default_factory=list)
    header: str = ""
    replacement: bool = False

    def to_payload(self) -> dict:
        """Keyword arguments for QuestionCreate."""
        return {
            "subject": self.subject,
            "round": self.round,
            "question_type": self.question_type,
            "question_role": self.question_role,
            "question_number": self.question_number,
            "question": self.question,
            "answer": self.answer,
            "choices": list(self.choices),
        }


@dataclass(frozen=True)
class SkippedCell:
    row: int
    column: int
    reason: str


@dataclass
class CsvParseResult:
    drafts: List[QuestionDraft] = field(default_factory=list)
    skipped: List[SkippedCell] = field(default_factory=list)


def relax_quotes(csv_text: str) -> str:
    """Double the stray quotes inside quoted fields so the reader keeps them.

    A quote inside a quoted field only closes it when followed by a
    delimiter, a line break or the end of the text; any other inner quote is
    literal text (``"What is "x" here?"``). Quotes in unquoted fields are
    already literal and are left alone.
    """
    out = []
    in_quotes = False
    field_start = True
    i = 0
    while i < len(csv_text):
        ch = csv_text[i]
        nxt = csv_text[i + 1:i + 2]
        if in_quotes and ch == QUOTE:
            if nxt == QUOTE:
                out.append(QUOTE * 2)
                i += 2
                continue
            if nxt in _FIELD_END:
                in_quotes = False
                out.append(ch)
            else:
                out.append(QUOTE * 2)
        elif ch == QUOTE and field_start:
            in_quotes = True
            out.append(ch)
        else:
            out.append(ch)
        field_start = not in_quotes and ch in (DELIMITER, "\n", "\r")
        i += 1

    if in_quotes:
        raise CsvFormatError("Error parsing CSV: EOF inside a quoted field")
    return "".join(out)


def read_grid(csv_text: str) -> List[List[str]]:
    """Raw CSV text as a list of rows of strings. Blank lines are dropped.

    Every row is as wide as the header row: short rows are padded and the
    extra cells of over-wide rows are dropped with a warning.
    """
    if csv_text is None or not csv_text.strip():
        raise CsvFormatError("Invalid CSV format: file is empty")
    text = relax_quotes(csv_text)
    options = dict(
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        index_col=False,
        engine="python",
    )
    try:
        width = pd.read_csv(io.StringIO(text), nrows=1, **options).shape[1]

        def truncate(bad_line: List[str]) -> List[str]:
            logger.warning(
                f"CSV row has {len(bad_line)} cells, header has {width}; "
                f"dropping {bad_line[width:]!r}"
            )
            return bad_line[:width]

        df = pd.read_csv(
            io.StringIO(text),
            names=list(range(width)),
            on_bad_lines=truncate,
            **options,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        logger.warning(f"CSV parse error: {e}")
        raise CsvFormatError(f"Error parsing CSV: {e}") from e
    df = df.fillna("")
    return [[str(v) for v in row] for row in df.values.tolist()]


def parse_slot_header(header: str) -> Optional[Tuple[str, int]]:
    """``"T3 Question"`` -> ``("Tossup", 3)``; None if the header is not a slot."""
    match = SLOT_HEADER.match(header or "")
    if not match:
        return None
    role = QuestionRole.TOSSUP if match.group(1).upper() == "T" else QuestionRole.BONUS
    return role.value, int(match.group(2))


def _replacement_role(header: str, default: QuestionRole) -> str:
    lowered = (header or "").lower()
    if "bonus" in lowered:
        return QuestionRole.BONUS.value
    if "tossup" in lowered or "toss-up" in lowered:
        return QuestionRole.TOSSUP.value
    return default.value


@dataclass(frozen=True)
class _Column:
    index: int
    header: str
    role: str
    number: int
    replacement: bool


def plan_columns(header_row: List[str]) -> List[_Column]:
    """Which columns carry questions, in output order.

    Regular slot columns come first, then the two trailing replacement
    columns (second-to-last tossup, last bonus). A trailing column whose
    header is itself a slot header is read as a regular slot.
    """
    width = len(header_row)
    trailing = {}
    for index, default in ((width - 2, QuestionRole.TOSSUP), (width - 1, QuestionRole.BONUS)):
        if index >= 1 and parse_slot_header(header_row[index]) is None:
            trailing[index] = default

    regular, replacements = [], []
    for index in range(1, width):
        header = header_row[index].strip()
        if index in trailing:
            role = _replacement_role(header, trailing[index])
            replacements.append(_Column(index, header, role, REPLACEMENT_NUMBER, True))
            continue
        slot = parse_slot_header(header)
        if slot is None:
            logger.info(f"Skipping column {index}: header {header!r} is not a slot header")
            continue
        role, number = slot
        regular.append(_Column(index, header, role, number, False))
    return regular + replacements


def _draft(cell: ParsedCell, column: _Column, subject, round_number, code) -> QuestionDraft:
    return QuestionDraft(
        subject=subject,
        round=round_number,
        round_code=code,
        question_type=cell.kind.question_type.value,
        question_role=column.role,
        question_number=column.number,
        question=cell.question,
        answer=cell.answer,
        choices=list(cell.choices),
        header=column.header,
        replacement=column.replacement,
    )


def _parse_rows(grid, subject, rows) -> CsvParseResult:
    result = CsvParseResult()
    columns = plan_columns(grid[0])

    for row_index in rows:
        row = grid[row_index]
        code = row[0].strip() if row else ""
        round_number = lookup_round_code(code)
        if round_number is None:
            logger.info(f"Skipping row {row_index}: unknown round code {code!r}")
            continue

        for column in columns:
            text = row[column.index] if column.index < len(row) else ""
            if not text.strip():
                continue
            cell = decode_cell(text)
            if not isinstance(cell, ParsedCell):
                logger.warning(
                    f"Skipping cell row {row_index} column {column.index} "
                    f"({column.header!r}): {cell.reason}"
                )
                result.skipped.append(SkippedCell(row_index, column.index, cell.reason))
                continue
            result.drafts.append(_draft(cell, column, subject, round_number, code.lower()))
    return result


def parse_csv(csv_text: str, subject: Optional[str]) -> CsvParseResult:
    """All drafts in the sheet, row by row."""
    grid = read_grid(csv_text)
    if len(grid) < 2:
        raise CsvFormatError("Invalid CSV format: expected a header row and at least one data row")
    result = _parse_rows(grid, subject, range(1, len(grid)))
    logger.info(
        f"Parsed CSV: {len(result.drafts)} drafts, {len(result.skipped)} cells skipped"
    )
    return result


def preview_csv(csv_text: str, subject: Optional[str] = None) -> List[QuestionDraft]:
    """Drafts from the first data row only: up to three regular slots plus replacements."""
    grid = read_grid(csv_text)
    if len(grid) < 2:
        raise CsvFormatError("Invalid CSV format: expected a header row and at least one data row")
    drafts = _parse_rows(grid, subject, [1]).drafts
    regular = [d for d in drafts if not d.replacement][:PREVIEW_LIMIT]
    return regular + [d for d in drafts if d.replacement]
