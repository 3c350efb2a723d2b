import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tsbapp.application.admin.generate_round_usecase import generate_round_documents
from tsbapp.application.rounds import ROUNDS
from tsbapp.errors import DocumentGenerationError, UnknownRoundCodeError
from tsbapp.presentation.dependencies import admin_required, get_db
from tsbapp.presentation.schemas.document_schema import GenerateRequest, GenerateResponse, RoundOut

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Documents"])

GENERATED_URL = "/generated"


@router.get("/rounds", response_model=List[RoundOut])
def get_rounds(admin: dict = Depends(admin_required)):
    return [RoundOut(code=r.code, name=r.name, number=r.number) for r in ROUNDS]


@router.post("/generate-latex", response_model=GenerateResponse)
def generate_latex(
    data: GenerateRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(admin_required),
):
    try:
        result = generate_round_documents(db, data.round)
    except UnknownRoundCodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DocumentGenerationError as e:
        logger.error(f"Document generation failed for {data.round}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    files = {kind: f"{GENERATED_URL}/{name}" for kind, name in result["files"].items()}
    return GenerateResponse(round=result["round"], files=files)
