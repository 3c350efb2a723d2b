"""Escaping of question text for LaTeX.

Text is read as alternating plain and math spans split on ``$``. Plain spans
have LaTeX metacharacters escaped; math spans are passed through so that
inline formulas typeset. ``\\$`` is a literal dollar sign: it never opens or
closes a math span and comes out as ``\\$`` in both kinds of span.
"""
import re
from typing import List, Tuple

MATH_DELIMITER = "$"
ESCAPE_MARKER = "\\"

# Stands in for an escaped delimiter until escaping is done
_LITERAL_DOLLAR = "\uE000"

LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "^": r"\^{}",
    "_": r"\_",
    "~": r"\textasciitilde{}",
    "#": r"\#",
    "&": r"\&",
    "%": r"\%",
}

PRONUNCIATION_PAIR = re.compile(r"\[([^\[\]]*)\]")
PRONUNCIATION_OPEN = r"\pronounce{"
PRONUNCIATION_CLOSE = "}"


def split_math_spans(text: str) -> List[Tuple[bool, str]]:
    """``[(is_math, content), ...]`` in order. Delimiters are not included."""
    spans = []
    current = []
    in_math = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == ESCAPE_MARKER and text[i + 1:i + 2] == MATH_DELIMITER:
            current.append(_LITERAL_DOLLAR)
            i += 2
            continue
        if ch == MATH_DELIMITER:
            spans.append((in_math, "".join(current)))
            current = []
            in_math = not in_math
        else:
            current.append(ch)
        i += 1

    tail = "".join(current)
    if in_math:
        # unterminated: the opening $ was just a dollar sign
        _, before = spans.pop()
        spans.append((False, before + _LITERAL_DOLLAR + tail))
    else:
        spans.append((False, tail))
    return spans


def escape_plain(text: str) -> str:
    return "".join(LATEX_SPECIALS.get(ch, ch) for ch in text)


def _in_math(position: int, math_ranges) -> bool:
    return any(start <= position < end for start, end in math_ranges)


def annotate_pronunciations(text: str, math_ranges=()) -> str:
    """``[FOH-ton]`` -> ``\\pronounce{FOH-ton}``.

    Pairs are matched over the whole text, so a guide may enclose inline
    math. A pair with either bracket inside a math range is left as is, as
    are unmatched brackets.
    """

    def wrap(match):
        if _in_math(match.start(), math_ranges) or _in_math(match.end() - 1, math_ranges):
            return match.group(0)
        return PRONUNCIATION_OPEN + match.group(1) + PRONUNCIATION_CLOSE

    return PRONUNCIATION_PAIR.sub(wrap, text)


def escape_latex(text: str) -> str:
    if not text:
        return ""
    out = []
    math_ranges = []
    position = 0
    for is_math, content in split_math_spans(text):
        if is_math:
            piece = MATH_DELIMITER + content + MATH_DELIMITER
            math_ranges.append((position, position + len(piece)))
        else:
            piece = escape_plain(content)
        out.append(piece)
        position += len(piece)
    annotated = annotate_pronunciations("".join(out), math_ranges)
    return annotated.replace(_LITERAL_DOLLAR, ESCAPE_MARKER + MATH_DELIMITER)
