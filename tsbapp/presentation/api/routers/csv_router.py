import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tsbapp.application.admin.csv_import_usecase import preview_csv_upload, process_csv_upload
from tsbapp.errors import CsvFormatError
from tsbapp.presentation.dependencies import admin_required, get_db
from tsbapp.presentation.schemas.csv_schema import (
    CsvPreviewRequest,
    CsvPreviewResponse,
    CsvUploadRequest,
    CsvUploadResponse,
    PreviewQuestion,
)
from tsbapp.presentation.schemas.question_schema import QuestionOut

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["CSV Import"])


@router.post("/upload-csv", response_model=CsvUploadResponse)
def upload_csv(
    data: CsvUploadRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(admin_required),
):
    try:
        result = process_csv_upload(db, data.csv_data, data.subject.value)
    except CsvFormatError as e:
        logger.warning(f"CSV upload rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    result["questions"] = [QuestionOut.model_validate(q) for q in result["questions"]]
    return CsvUploadResponse(**result)


@router.post("/preview-csv", response_model=CsvPreviewResponse)
def preview_csv(data: CsvPreviewRequest, admin: dict = Depends(admin_required)):
    try:
        questions = preview_csv_upload(data.csv_data, data.subject.value if data.subject else None)
    except CsvFormatError as e:
        logger.warning(f"CSV preview rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return CsvPreviewResponse(preview_questions=[PreviewQuestion(**q) for q in questions])
