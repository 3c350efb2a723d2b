import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from tsbapp.application.rounds import lookup_round_code
from tsbapp.errors import QuestionNotFoundError, ResetKeyError
from tsbapp.infrastructure.repositories.question_repo_impl import (
    create_question,
    delete_question,
    get_question_by_id,
    list_questions,
    reset_questions,
    update_question,
)
from tsbapp.presentation.dependencies import admin_required, get_db
from tsbapp.presentation.schemas.question_schema import (
    QuestionCreate,
    QuestionOut,
    QuestionResponse,
    QuestionUpdate,
    ResetRequest,
    Subject,
    SuccessResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Questions"])


def validation_detail(error: ValidationError) -> list:
    return [
        {"field": ".".join(str(part) for part in e["loc"]), "message": e["msg"]}
        for e in error.errors()
    ]


@router.post("/questions", response_model=QuestionResponse)
def add_question(
    question: QuestionCreate,
    db: Session = Depends(get_db),
    admin: dict = Depends(admin_required),
):
    result = create_question(db, question)
    return QuestionResponse(question=QuestionOut.model_validate(result))


@router.get("/questions", response_model=List[QuestionOut])
def get_questions(
    round: Optional[int] = Query(None, ge=1),
    round_code: Optional[str] = Query(None, alias="roundCode"),
    subject: Optional[Subject] = None,
    db: Session = Depends(get_db),
    admin: dict = Depends(admin_required),
):
    if round_code is not None:
        round = lookup_round_code(round_code)
        if round is None:
            raise HTTPException(status_code=400, detail=f"Unknown round code '{round_code}'")
    return list_questions(db, round=round, subject=subject.value if subject else None)


@router.get("/questions/{question_id}", response_model=QuestionOut)
def get_question(
    question_id: int,
    db: Session = Depends(get_db),
    admin: dict = Depends(admin_required),
):
    try:
        return get_question_by_id(db, question_id)
    except QuestionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/questions/{question_id}", response_model=QuestionResponse)
def modify_question(
    question_id: int,
    patch: QuestionUpdate,
    db: Session = Depends(get_db),
    admin: dict = Depends(admin_required),
):
    try:
        result = update_question(db, question_id, patch)
        return QuestionResponse(question=QuestionOut.model_validate(result))
    except QuestionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        logger.warning(f"Validation error updating question {question_id}: {e.errors()}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=validation_detail(e)
        )


@router.delete("/questions/{question_id}", response_model=SuccessResponse)
def remove_question(
    question_id: int,
    db: Session = Depends(get_db),
    admin: dict = Depends(admin_required),
):
    try:
        delete_question(db, question_id)
        return SuccessResponse()
    except QuestionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/reset-questions", response_model=SuccessResponse)
def reset_all_questions(
    data: ResetRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(admin_required),
):
    try:
        deleted = reset_questions(db, data.reset_key)
        return SuccessResponse(message=f"Deleted {deleted} questions")
    except ResetKeyError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
