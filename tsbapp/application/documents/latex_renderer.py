import logging
from string import Template
from typing import List

from tsbapp.presentation.schemas.question_schema import QuestionRole, QuestionType, Subject
from .latex_escape import escape_latex
from .layout import DocumentLayout, QuestionBlock, Separator

logger = logging.getLogger(__name__)

LOGO_FILENAME = "logo.png"

SUBJECT_CODES = {
    Subject.PHYSICS.value: "PHYSICS",
    Subject.CHEMISTRY.value: "CHEMISTRY",
    Subject.BIOLOGY.value: "BIOLOGY",
    Subject.EARTH_AND_SPACE.value: "EARTH AND SPACE",
    Subject.ENERGY.value: "ENERGY",
    Subject.MATH.value: "MATH",
    Subject.GENERAL_SCIENCE.value: "GENERAL SCIENCE",
}

ROLE_LABELS = {
    QuestionRole.TOSSUP.value: "TOSS-UP",
    QuestionRole.BONUS.value: "BONUS",
}

CHOICE_LETTERS = ("W", "X", "Y", "Z")

PREAMBLE = r"""\documentclass[11pt]{article}
\usepackage[margin=1in]{geometry}
\usepackage[T1]{fontenc}
\usepackage{textcomp}
\usepackage{amsmath,amssymb}
\usepackage{graphicx}
\usepackage{enumitem}
\setlength{\parindent}{0pt}
\pagestyle{plain}

\newcommand{\pronounce}[1]{\textit{[#1]}}
\newcommand{\questionseparator}{\par\medskip\noindent\rule{\linewidth}{0.4pt}\par\medskip}
\newcommand{\choice}[2]{\par\hspace*{2em}#1) #2}
\newcommand{\answerline}[1]{\par\medskip\textbf{ANSWER:} #1\par}
\newenvironment{rankedchoices}{\begin{enumerate}[label=\arabic*), leftmargin=3em, topsep=2pt, itemsep=0pt]}{\end{enumerate}}
\newenvironment{tsbquestion}[4]{%
  \par\noindent\textbf{#1.}\quad\textbf{#2}\hfill\textbf{#3}\par
  \noindent\textit{#4}\quad}{\par}
"""

HEADER = Template(r"""
\begin{document}
\IfFileExists{${logo}}{\begin{center}\includegraphics[height=2cm]{${logo}}\end{center}}{}
\begin{center}\Large\textbf{${title}}\end{center}
\bigskip
""")

BLOCK = Template(r"""\begin{tsbquestion}{${sequence}}{${role}}{${subject}}{${qtype}}
${body}
\answerline{${answer}}
\end{tsbquestion}
""")

SEPARATOR = "\\questionseparator\n"

FOOTER = "\\end{document}\n"


def _choice_lines(question) -> List[str]:
    choices = list(question.choices or [])
    if question.question_type == QuestionType.MULTIPLE_CHOICE.value:
        padded = (choices + [""] * len(CHOICE_LETTERS))[:len(CHOICE_LETTERS)]
        return [f"\\choice{{{letter}}}{{{escape_latex(text)}}}" for letter, text in zip(CHOICE_LETTERS, padded)]
    if choices:
        items = [f"  \\item {escape_latex(text)}" for text in choices]
        return ["\\begin{rankedchoices}"] + items + ["\\end{rankedchoices}"]
    return []


def render_block(block: QuestionBlock) -> str:
    q = block.question
    body = "\n".join([escape_latex(q.question)] + _choice_lines(q))
    return BLOCK.substitute(
        sequence=block.sequence,
        role=ROLE_LABELS.get(q.question_role, q.question_role.upper()),
        subject=SUBJECT_CODES.get(q.subject, escape_latex(q.subject).upper()),
        qtype=q.question_type,
        body=body,
        answer=escape_latex(q.answer),
    )


def render_document(layout: DocumentLayout) -> str:
    parts = [PREAMBLE, HEADER.substitute(logo=LOGO_FILENAME, title=escape_latex(layout.title))]
    for item in layout.items:
        if isinstance(item, Separator):
            parts.append(SEPARATOR)
        else:
            parts.append(render_block(item))
    parts.append(FOOTER)
    logger.debug(f"Rendered '{layout.title}' with {layout.question_count} questions")
    return "".join(parts)
