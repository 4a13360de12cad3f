from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
from models.student_pin import PINStatus
from core.config import (
    BRANCH_CODES, ACADEMIC_YEARS, MIN_JOINING_YEAR, MAX_JOINING_YEAR,
    MAX_SECTION_LENGTH, MAX_PINS_PER_REQUEST,
)

class ErrorType(str, Enum):
    VALIDATION      = "validation"
    NOT_FOUND       = "not_found"
    CONFLICT        = "conflict"
    PARTIAL_FAILURE = "partial_failure"
    STORE           = "store"

class DeleteStep(str, Enum):
    LOOKUP   = "lookup"
    PRODUCTS = "products"
    STUDENT  = "student"
    PIN      = "pin"


class PINScopeRequest(BaseModel):
    joining_year: int = Field(..., ge=MIN_JOINING_YEAR, le=MAX_JOINING_YEAR)
    branch: str
    year: int
    section: str = Field(..., min_length=1, max_length=MAX_SECTION_LENGTH)

    @field_validator("branch")
    @classmethod
    def validate_branch(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in BRANCH_CODES:
            raise ValueError(f"Invalid branch. Must be one of: {', '.join(BRANCH_CODES)}")
        return v

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        if v not in ACADEMIC_YEARS:
            raise ValueError("Year must be 1, 2 or 3")
        return v

    @field_validator("section")
    @classmethod
    def validate_section(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("Section is required")
        if not v.isalnum():
            raise ValueError("Section must contain only letters and digits")
        return v


class PINRangeCreateRequest(PINScopeRequest):
    start_sequence: int = Field(..., ge=1)
    end_sequence: int = Field(..., ge=1)

    @model_validator(mode="after")
    def validate_range(self):
        if self.start_sequence > self.end_sequence:
            raise ValueError("End number must be greater than or equal to start number")
        if self.end_sequence - self.start_sequence + 1 > MAX_PINS_PER_REQUEST:
            raise ValueError(f"Cannot create more than {MAX_PINS_PER_REQUEST} PINs in one request")
        return self


class PINIndividualCreateRequest(PINScopeRequest):
    pin_sequences: List[str] = Field(..., min_length=1, max_length=MAX_PINS_PER_REQUEST)


class PINStatusUpdateRequest(BaseModel):
    status: PINStatus


class PINBulkDeleteRequest(BaseModel):
    pin_numbers: List[str] = Field(..., min_length=1, max_length=MAX_PINS_PER_REQUEST)


class PINResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    pin_number: str
    joining_year: int
    branch: str
    year: int
    section: str
    pin_sequence: int
    status: PINStatus
    created_at: Optional[datetime] = None


class PINCreateResult(BaseModel):
    success: bool
    count: int = 0
    pin_numbers: List[str] = []
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None


class PINQueryResult(BaseModel):
    success: bool
    data: Optional[PINResponse] = None
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None


class PINStatusUpdateResult(BaseModel):
    success: bool
    pin_number: str
    status: Optional[PINStatus] = None
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None


class DeletedSummary(BaseModel):
    pin_number: str
    pin_deleted: bool
    student: bool
    products_count: int = 0


class PINDeleteResult(BaseModel):
    success: bool
    deleted: Optional[DeletedSummary] = None
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None
    failed_step: Optional[DeleteStep] = None
    partial_failure: bool = False


class PINBulkDeleteResult(BaseModel):
    total: int
    succeeded: int
    failed: int
    students_deleted: int
    products_deleted: int
    partial_failures: List[str] = []
    results: List[PINDeleteResult] = []


class PINStatistics(BaseModel):
    total_pins: int
    available_pins: int
    registered_pins: int
    blocked_pins: int
    joining_years_count: int
    branches_count: int
    sections_count: int
    joining_years: List[int]
    branches: List[str]
    sections: List[str]
