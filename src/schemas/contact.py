import uuid
from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator

PHONE_PATTERN = r"^[0-9+()-]+$"


def _check_tags(tags: list[str]):
    for tag in tags:
        if not 1 <= len(tag) <= 50:
            raise ValueError("each tag must be between 1 and 50 characters long")
    return tags


def _bounded_or_empty(value: str | None, min_length: int, max_length: int):
    if value is None or value == "":
        return value
    if len(value) < min_length:
        raise ValueError(f"must be at least {min_length} characters long")
    if len(value) > max_length:
        raise ValueError(f"must be at most {max_length} characters long")
    return value


class Address(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = Field(default=None, alias="postalCode")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("street")
    @classmethod
    def check_street(cls, v):
        return _bounded_or_empty(v, 4, 100)

    @field_validator("city", "state")
    @classmethod
    def check_city_state(cls, v):
        return _bounded_or_empty(v, 2, 50)

    @field_validator("postal_code")
    @classmethod
    def check_postal_code(cls, v):
        return _bounded_or_empty(v, 4, 20)


class ContactBase(BaseModel):
    name: str = Field(min_length=4, max_length=50)
    phone: str = Field(min_length=7, max_length=15, pattern=PHONE_PATTERN)
    email: EmailStr
    address: Address | None = None
    notes: str | None = Field(default=None, max_length=500)
    birthday: date | None = None
    tags: list[str] = Field(default_factory=list)
    favorite: bool = False

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v):
        return _check_tags(v)


class ContactCreate(ContactBase):
    pass


class ContactUpdate(BaseModel):
    """
    Partial update: only the fields present in the request body are applied.
    """
    id: str | None = None
    name: str | None = Field(default=None, min_length=4, max_length=50)
    phone: str | None = Field(default=None, min_length=7, max_length=15, pattern=PHONE_PATTERN)
    email: EmailStr | None = None
    address: Address | None = None
    notes: str | None = Field(default=None, max_length=500)
    birthday: date | None = None
    tags: list[str] | None = None
    favorite: bool | None = None

    @field_validator("name", "phone", "email", "tags", "favorite", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v):
        if v is None:
            return v
        return _check_tags(v)


class FavoriteModel(BaseModel):
    favorite: bool


class Contact(ContactBase):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ContactList(BaseModel):
    contacts: list[Contact]
