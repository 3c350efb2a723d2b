# question_schema.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Subject(str, Enum):
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    BIOLOGY = "Biology"
    EARTH_AND_SPACE = "Earth & Space"
    ENERGY = "Energy"
    MATH = "Math"
    GENERAL_SCIENCE = "General Science"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "Multiple Choice"
    SHORT_ANSWER = "Short Answer"


class QuestionRole(str, Enum):
    TOSSUP = "Tossup"
    BONUS = "Bonus"


# 1-5 regular slots, 6-7 replacements
MIN_QUESTION_NUMBER = 1
MAX_QUESTION_NUMBER = 7


class QuestionCreate(BaseModel):
    """Validated question as it is written to the store.

    Manual entry, edits and CSV drafts all pass through this model.
    """

    subject: Subject
    round: int = Field(..., ge=1)
    question_type: QuestionType = Field(..., alias="questionType")
    question_role: QuestionRole = Field(QuestionRole.TOSSUP, alias="questionRole")
    question_number: int = Field(
        ..., alias="questionNumber", ge=MIN_QUESTION_NUMBER, le=MAX_QUESTION_NUMBER
    )
    question: str
    answer: str
    choices: List[str] = []

    class Config:
        populate_by_name = True

    @field_validator("question", "answer")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("choices")
    @classmethod
    def strip_choices(cls, value: List[str]) -> List[str]:
        return [c.strip() for c in value]

    def to_record(self) -> dict:
        """Column values for QuestionModel."""
        return {
            "subject": self.subject.value,
            "round": self.round,
            "question_type": self.question_type.value,
            "question_role": self.question_role.value,
            "question_number": self.question_number,
            "question": self.question,
            "answer": self.answer,
            "choices": list(self.choices),
        }


class QuestionUpdate(BaseModel):
    subject: Optional[Subject] = None
    round: Optional[int] = None
    question_type: Optional[QuestionType] = Field(None, alias="questionType")
    question_role: Optional[QuestionRole] = Field(None, alias="questionRole")
    question_number: Optional[int] = Field(None, alias="questionNumber")
    question: Optional[str] = None
    answer: Optional[str] = None
    choices: Optional[List[str]] = None

    class Config:
        populate_by_name = True


class QuestionOut(BaseModel):
    id: int
    subject: str
    round: int
    question_type: str = Field(..., alias="questionType")
    question_role: str = Field(..., alias="questionRole")
    question_number: int = Field(..., alias="questionNumber")
    question: str
    answer: str
    choices: List[str] = []
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class QuestionResponse(BaseModel):
    success: bool = True
    question: QuestionOut


class ResetRequest(BaseModel):
    reset_key: str = Field(..., alias="resetKey")

    class Config:
        populate_by_name = True


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
