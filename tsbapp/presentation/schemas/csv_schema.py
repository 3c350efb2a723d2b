from typing import List, Optional
from pydantic import BaseModel, Field

from .question_schema import QuestionOut, Subject


class CsvUploadRequest(BaseModel):
    csv_data: str = Field(..., alias="csvData")
    subject: Subject

    class Config:
        populate_by_name = True


class CsvPreviewRequest(BaseModel):
    csv_data: str = Field(..., alias="csvData")
    subject: Optional[Subject] = None

    class Config:
        populate_by_name = True


class CsvUploadResponse(BaseModel):
    success: bool = True
    message: str
    count: int
    failed: int = 0
    questions: List[QuestionOut] = []


class PreviewQuestion(BaseModel):
    header: str
    round: str
    question_type: str = Field(..., alias="questionType")
    question_role: str = Field(..., alias="questionRole")
    question_number: int = Field(..., alias="questionNumber")
    question: str
    answer: str
    choices: List[str] = []

    class Config:
        populate_by_name = True


class CsvPreviewResponse(BaseModel):
    success: bool = True
    preview_questions: List[PreviewQuestion] = Field([], alias="previewQuestions")

    class Config:
        populate_by_name = True
