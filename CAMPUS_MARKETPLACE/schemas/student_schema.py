from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
import re
from models.student import StudentStatus
from schemas.pin_schema import ErrorType

PHONE_PATTERN = re.compile(r"^\+?[0-9]{10,15}$")


def _clean_phone(v: str) -> str:
    v = re.sub(r"[\s-]", "", v)
    if not PHONE_PATTERN.match(v):
        raise ValueError("Phone number must contain 10-15 digits")
    return v


class StudentRegistrationRequest(BaseModel):
    pin_number: str = Field(..., min_length=5, max_length=30)
    full_name: str = Field(..., min_length=2, max_length=150)
    email: EmailStr
    phone_number: str
    whatsapp_number: Optional[str] = None

    @field_validator("pin_number")
    @classmethod
    def validate_pin_number(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = " ".join(v.split())
        if len(v) < 2:
            raise ValueError("Full name is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: EmailStr) -> str:
        return str(v).strip().lower()

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return _clean_phone(v)

    @field_validator("whatsapp_number")
    @classmethod
    def validate_whatsapp(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return _clean_phone(v)


class StudentStatusUpdateRequest(BaseModel):
    status: StudentStatus


class StudentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int
    pin_number: str
    full_name: str
    email: str
    phone_number: str
    whatsapp_number: Optional[str] = None
    joining_year: int
    branch: str
    year: int
    section: str
    status: StudentStatus
    email_confirmed: bool
    email_confirmed_at: Optional[datetime] = None
    created_at: datetime


class RegistrationResult(BaseModel):
    success: bool
    data: Optional[StudentResponse] = None
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None
