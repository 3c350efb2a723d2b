"""Round-code vocabulary used at the API and CSV boundaries.

Only canonical round numbers are stored; codes such as ``rr1`` or ``de3``
are translated here.
"""
from dataclasses import dataclass
from typing import List, Optional

from tsbapp.errors import UnknownRoundCodeError


@dataclass(frozen=True)
class Round:
    code: str
    name: str
    number: int


ROUNDS: List[Round] = (
    [Round(f"rr{i}", f"Round Robin {i}", i) for i in range(1, 6)]
    + [Round(f"de{i}", f"Double Elimination {i}", i + 5) for i in range(1, 8)]
    + [Round(f"f{i}", f"Finals {i}", i + 12) for i in range(1, 3)]
)

_BY_CODE = {r.code: r for r in ROUNDS}
_BY_NUMBER = {r.number: r for r in ROUNDS}


def lookup_round(code: str) -> Optional[Round]:
    """The Round for a code (case-insensitive), or None."""
    if code is None:
        return None
    return _BY_CODE.get(code.strip().lower())


def lookup_round_code(code: str) -> Optional[int]:
    """Canonical round number for a code, or None."""
    r = lookup_round(code)
    return r.number if r else None


def get_round(code: str) -> Round:
    r = lookup_round(code)
    if r is None:
        raise UnknownRoundCodeError(code)
    return r


def round_code(number: int) -> Optional[str]:
    r = _BY_NUMBER.get(number)
    return r.code if r else None
