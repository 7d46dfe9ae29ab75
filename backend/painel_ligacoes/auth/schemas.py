from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    senha: str = Field(min_length=1, max_length=256)


class LoginResponse(BaseModel):
    success: bool


class LoginLog(BaseModel):
    date: datetime
    ip: str
