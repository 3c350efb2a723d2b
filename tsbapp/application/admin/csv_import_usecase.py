import logging
from typing import List

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tsbapp.application.imports.csv_parser import QuestionDraft, parse_csv, preview_csv
from tsbapp.infrastructure.db.models.question_model import QuestionModel
from tsbapp.infrastructure.repositories.question_repo_impl import create_question
from tsbapp.presentation.schemas.question_schema import QuestionCreate

logger = logging.getLogger(__name__)


def process_csv_upload(db: Session, csv_text: str, subject: str) -> dict:
    """Parse a round sheet for one subject and store every valid question.

    Each draft goes through the same validation and creation path as a
    manually entered question. A draft that fails is logged and skipped;
    the rest of the batch still goes in. CsvFormatError propagates when the
    file itself cannot be read.
    """
    logger.info(f"Processing CSV upload for subject {subject}")
    parsed = parse_csv(csv_text, subject)

    created: List[QuestionModel] = []
    failed = len(parsed.skipped)
    for draft in parsed.drafts:
        try:
            question_data = QuestionCreate(**draft.to_payload())
            created.append(create_question(db, question_data))
        except ValidationError as e:
            failed += 1
            logger.warning(
                f"Rejected draft {draft.round_code} {draft.question_role} "
                f"{draft.question_number}: {e.errors()}"
            )
        except SQLAlchemyError as e:
            failed += 1
            logger.error(f"Could not store draft {draft.round_code} {draft.header}: {e}")

    logger.info(f"CSV upload finished. Inserted: {len(created)}, Failed: {failed}")
    return {
        "success": True,
        "message": f"Successfully uploaded {len(created)} questions",
        "count": len(created),
        "failed": failed,
        "questions": created,
    }


def preview_csv_upload(csv_text: str, subject: str = None) -> List[dict]:
    drafts: List[QuestionDraft] = preview_csv(csv_text, subject)
    logger.info(f"CSV preview produced {len(drafts)} questions")
    return [
        {
            "header": d.header,
            "round": d.round_code.upper(),
            "question_type": d.question_type,
            "question_role": d.question_role,
            "question_number": d.question_number,
            "question": d.question,
            "answer": d.answer,
            "choices": d.choices,
        }
        for d in drafts
    ]
