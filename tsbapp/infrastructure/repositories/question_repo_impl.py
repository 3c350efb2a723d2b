import hmac
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tsbapp import config
from tsbapp.errors import QuestionNotFoundError, ResetKeyError
from tsbapp.infrastructure.db.models.question_model import QuestionModel
from tsbapp.presentation.schemas.question_schema import QuestionCreate, QuestionUpdate

logger = logging.getLogger(__name__)

SLOT_FIELDS = ("subject", "round", "question_role", "question_number")
EDITABLE_FIELDS = SLOT_FIELDS + ("question_type", "question", "answer", "choices")


def create_question(db: Session, question_data: QuestionCreate) -> QuestionModel:
    """Persist an already validated question."""
    try:
        question = QuestionModel(**question_data.to_record())
        db.add(question)
        db.commit()
        db.refresh(question)
        logger.info(
            f"Created question {question.id} at slot {question.slot}"
        )
        return question
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error creating question: {e}", exc_info=True)
        raise


def list_questions(
    db: Session, round: Optional[int] = None, subject: Optional[str] = None
) -> List[QuestionModel]:
    """All questions, optionally narrowed to one round and/or subject."""
    query = db.query(QuestionModel)
    if round is not None:
        query = query.filter(QuestionModel.round == round)
    if subject is not None:
        query = query.filter(QuestionModel.subject == subject)
    questions = query.order_by(
        QuestionModel.round,
        QuestionModel.subject,
        QuestionModel.question_role.desc(),  # Tossup before Bonus
        QuestionModel.question_number,
        QuestionModel.id,
    ).all()
    logger.info(f"Retrieved {len(questions)} questions (round={round}, subject={subject})")
    return questions


def get_question_by_id(db: Session, question_id: int) -> QuestionModel:
    question = db.query(QuestionModel).filter(QuestionModel.id == question_id).first()
    if not question:
        logger.warning(f"Question with id {question_id} not found")
        raise QuestionNotFoundError(question_id)
    return question


def _find_occupant(db: Session, slot: tuple, exclude_id: int) -> Optional[QuestionModel]:
    subject, round_, role, number = slot
    return (
        db.query(QuestionModel)
        .filter(
            QuestionModel.subject == subject,
            QuestionModel.round == round_,
            QuestionModel.question_role == role,
            QuestionModel.question_number == number,
            QuestionModel.id != exclude_id,
        )
        .order_by(QuestionModel.id)
        .with_for_update()
        .first()
    )


def update_question(db: Session, question_id: int, patch: QuestionUpdate) -> QuestionModel:
    """Apply an edit, swapping places with whatever occupies the target slot.

    The relocation of the occupant and the write of the edited question are
    committed together, so a failure leaves both records where they were.
    Raises QuestionNotFoundError or pydantic.ValidationError.
    """
    question = get_question_by_id(db, question_id)

    merged = {field: getattr(question, field) for field in EDITABLE_FIELDS}
    merged.update(patch.model_dump(exclude_unset=True))
    values = QuestionCreate.model_validate(merged).to_record()

    original_slot = question.slot
    target_slot = tuple(values[f] for f in SLOT_FIELDS)

    try:
        if target_slot != original_slot:
            occupant = _find_occupant(db, target_slot, exclude_id=question.id)
            if occupant is not None:
                logger.info(
                    f"Slot {target_slot} is held by question {occupant.id}; "
                    f"moving it to {original_slot}"
                )
                for field, value in zip(SLOT_FIELDS, original_slot):
                    setattr(occupant, field, value)

        for field, value in values.items():
            setattr(question, field, value)

        db.commit()
        db.refresh(question)
        logger.info(f"Updated question {question.id} (slot {question.slot})")
        return question
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error updating question {question_id}: {e}", exc_info=True)
        raise


def delete_question(db: Session, question_id: int) -> None:
    question = get_question_by_id(db, question_id)
    try:
        db.delete(question)
        db.commit()
        logger.info(f"Deleted question {question_id}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error deleting question {question_id}: {e}", exc_info=True)
        raise


def count_questions(db: Session) -> int:
    return db.query(QuestionModel).count()


def reset_questions(db: Session, reset_key: str, expected_key: Optional[str] = None) -> int:
    """Delete every question when the reset key matches. Returns the number removed."""
    expected = config.RESET_KEY if expected_key is None else expected_key
    if not reset_key or not hmac.compare_digest(reset_key.encode(), expected.encode()):
        logger.warning("Reset of all questions rejected: wrong reset key")
        raise ResetKeyError("Invalid reset key")
    try:
        deleted = db.query(QuestionModel).delete(synchronize_session=False)
        db.commit()
        logger.info(f"Reset questions: removed {deleted} records")
        return deleted
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error resetting questions: {e}", exc_info=True)
        raise
