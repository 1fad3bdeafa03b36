from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

TrimmedName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, max_length=30)]


class UserRegister(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Annotated[EmailStr, Field(max_length=255)]
    password: Annotated[str, Field(min_length=6, max_length=128)]
    full_name: TrimmedName
    location: TrimmedName
    phone: Phone | None = None


class UserLogin(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Annotated[EmailStr, Field(max_length=255)]
    password: Annotated[str, Field(min_length=1, max_length=128)]


class UserUpdate(BaseModel):
    """Profile fields a user may change. Unset fields are left alone."""

    model_config = ConfigDict(extra="ignore")

    full_name: TrimmedName | None = None
    location: TrimmedName | None = None
    phone: Phone | None = None


class UserPublic(BaseModel):
    id: str
    email: str
    full_name: str
    location: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
    points: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
