from typing import Dict
from pydantic import BaseModel


class GenerateRequest(BaseModel):
    round: str  # round code, e.g. "rr1"


class GenerateResponse(BaseModel):
    success: bool = True
    round: str
    files: Dict[str, str]


class RoundOut(BaseModel):
    code: str
    name: str
    number: int
