from pydantic import BaseModel
from datetime import datetime

MIN_PASSWORD_LENGTH = 8


class User(BaseModel):
    id: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CreateUserInput(BaseModel):
    email: str = ""
    password: str = ""


class UserResponse(BaseModel):
    id: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True
