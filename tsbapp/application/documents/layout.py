"""Which question goes where in a round's documents.

Layout is decided here, before any text is produced; the renderer only
formats and escapes what the layout lists.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Union

from tsbapp.presentation.schemas.question_schema import QuestionRole, Subject

logger = logging.getLogger(__name__)

SUBJECT_ORDER = (
    Subject.BIOLOGY.value,
    Subject.CHEMISTRY.value,
    Subject.MATH.value,
    Subject.PHYSICS.value,
    Subject.EARTH_AND_SPACE.value,
)
REGULAR_NUMBERS = (1, 2, 3, 4, 5)
REPLACEMENT_NUMBERS = (6, 7)
ROLE_ORDER = (QuestionRole.TOSSUP.value, QuestionRole.BONUS.value)


@dataclass(frozen=True)
class QuestionBlock:
    sequence: int
    question: object  # anything shaped like QuestionModel


@dataclass(frozen=True)
class Separator:
    pass


LayoutItem = Union[QuestionBlock, Separator]


@dataclass
class DocumentLayout:
    title: str
    items: List[LayoutItem] = field(default_factory=list)

    @property
    def blocks(self) -> List[QuestionBlock]:
        return [item for item in self.items if isinstance(item, QuestionBlock)]

    @property
    def question_count(self) -> int:
        return len(self.blocks)


SlotIndex = Dict[Tuple[str, str, int], object]


def index_by_slot(questions: Iterable) -> SlotIndex:
    """(subject, role, number) -> question. The lowest id wins a shared slot."""
    slots: SlotIndex = {}
    for q in sorted(questions, key=lambda q: (q.id is None, q.id or 0)):
        key = (q.subject, q.question_role, q.question_number)
        if key in slots:
            logger.warning(f"Slot {key} has more than one question; using {slots[key].id}")
            continue
        slots[key] = q
    return slots


def sequence_number(number: int, subject: str) -> int:
    return (number - 1) * len(SUBJECT_ORDER) + SUBJECT_ORDER.index(subject) + 1


def build_main_layout(questions: Iterable, title: str) -> DocumentLayout:
    """Slots 1-5, numbered across subjects; a separator after every pair."""
    slots = index_by_slot(questions)
    layout = DocumentLayout(title=title)
    for number in REGULAR_NUMBERS:
        for subject in SUBJECT_ORDER:
            seq = sequence_number(number, subject)
            for role in ROLE_ORDER:
                question = slots.get((subject, role, number))
                if question is not None:
                    layout.items.append(QuestionBlock(seq, question))
            layout.items.append(Separator())
    return layout


def build_replacement_layout(questions: Iterable, title: str) -> DocumentLayout:
    """Slots 6 and 7 per subject; tossup is 1 and bonus is 2 within each slot."""
    slots = index_by_slot(questions)
    layout = DocumentLayout(title=title)
    for subject in SUBJECT_ORDER:
        for number in REPLACEMENT_NUMBERS:
            blocks = []
            for seq, role in enumerate(ROLE_ORDER, start=1):
                question: Optional[object] = slots.get((subject, role, number))
                if question is not None:
                    blocks.append(QuestionBlock(seq, question))
            if blocks:
                layout.items.extend(blocks)
                layout.items.append(Separator())
    return layout
