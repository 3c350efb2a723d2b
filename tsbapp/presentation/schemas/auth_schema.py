from pydantic import BaseModel


class LoginRequest(BaseModel):
    password: str


class Token(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
