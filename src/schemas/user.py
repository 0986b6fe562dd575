import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, ConfigDict


class UserModel(BaseModel):
    name: str = Field(min_length=1, max_length=25)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)


class LoginModel(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserDb(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    avatar: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    token: str
    user: UserDb


class ChangePasswordModel(BaseModel):
    current_password: str = Field(alias="currentPassword")
    new_password: str = Field(alias="newPassword", min_length=6, max_length=72)

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str
