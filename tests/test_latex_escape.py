"""Tests for LaTeX escaping of question text."""

import pytest

from tsbapp.application.documents.latex_escape import (
    annotate_pronunciations,
    escape_latex,
    split_math_spans,
)


class TestMathSpans:
    def test_percent_escaped_outside_math_only(self) -> None:
        assert escape_latex("50% energy is $E=mc^2$") == r"50\% energy is $E=mc^2$"

    def test_math_is_passed_through(self) -> None:
        assert escape_latex(r"Solve $x_1^2 + \frac{1}{2} = 0$ now") == (
            r"Solve $x_1^2 + \frac{1}{2} = 0$ now"
        )

    def test_spans_alternate(self) -> None:
        assert split_math_spans("a $b$ c $d$") == [
            (False, "a "),
            (True, "b"),
            (False, " c "),
            (True, "d"),
            (False, ""),
        ]

    def test_escaped_dollar_does_not_toggle(self) -> None:
        assert escape_latex(r"It costs \$5 and $x_1$ is 5_a") == r"It costs \$5 and $x_1$ is 5\_a"

    def test_unterminated_math_is_plain_text(self) -> None:
        assert escape_latex("Pay $5 for 10% off") == r"Pay \$5 for 10\% off"


class TestPlainEscaping:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("a_b", r"a\_b"),
            ("R&D", r"R\&D"),
            ("#1", r"\#1"),
            ("~5", r"\textasciitilde{}5"),
            ("{x}", r"\{x\}"),
            ("2^3", r"2\^{}3"),
            ("C:\\dir", r"C:\textbackslash{}dir"),
            ("100%", r"100\%"),
        ],
    )
    def test_metacharacters(self, text, expected) -> None:
        assert escape_latex(text) == expected

    def test_empty(self) -> None:
        assert escape_latex("") == ""
        assert escape_latex(None) == ""


class TestPronunciation:
    def test_bracket_pair_becomes_annotation(self) -> None:
        assert escape_latex("What is a photon [FOH-ton]?") == r"What is a photon \pronounce{FOH-ton}?"

    def test_brackets_inside_math_are_kept(self) -> None:
        assert escape_latex("on $[0, 1]$") == "on $[0, 1]$"

    def test_unpaired_bracket_is_left(self) -> None:
        assert annotate_pronunciations("a [b") == "a [b"

    def test_guide_may_enclose_math(self) -> None:
        assert escape_latex("say [ex $x^2$ sq]") == r"say \pronounce{ex $x^2$ sq}"

    def test_pair_ending_inside_math_is_left(self) -> None:
        assert escape_latex("[a $x] b$") == "[a $x] b$"

    def test_several_guides_in_one_text(self) -> None:
        assert escape_latex("[A] and 5% [B]") == r"\pronounce{A} and 5\% \pronounce{B}"
