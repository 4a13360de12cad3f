from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from core.database import get_db
from core.errors import raise_for_result, GENERIC_RETRY_MESSAGE
from schemas.common_schema import AvailabilityResult
from schemas.student_schema import StudentRegistrationRequest, StudentResponse
from services.pin_allocation_service import PINAllocationService
from services.registration_service import RegistrationService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/registration", tags=["Registration"])

@router.get("/joining-years", response_model=AvailabilityResult)
def get_joining_years(db: Session = Depends(get_db)):
    return PINAllocationService.available_joining_years(db)

@router.get("/branches", response_model=AvailabilityResult)
def get_branches(
    joining_year: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return PINAllocationService.available_branches(db, joining_year)

@router.get("/years", response_model=AvailabilityResult)
def get_years(
    joining_year: Optional[int] = Query(None),
    branch: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return PINAllocationService.available_years(db, joining_year, branch)

@router.get("/sections", response_model=AvailabilityResult)
def get_sections(
    joining_year: Optional[int] = Query(None),
    branch: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return PINAllocationService.available_sections(db, joining_year, branch, year)

@router.get("/pins", response_model=AvailabilityResult)
def get_pins(
    joining_year: Optional[int] = Query(None),
    branch: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    section: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return PINAllocationService.available_pins(db, joining_year, branch, year, section)


@router.post("", response_model=StudentResponse, status_code=201)
def register_student(request: StudentRegistrationRequest, db: Session = Depends(get_db)):
    try:
        result = RegistrationService.register_student(db, request)
        raise_for_result(result)
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Registration error: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.post("/{student_id}/confirm-email", response_model=StudentResponse)
def confirm_email(student_id: int, db: Session = Depends(get_db)):
    try:
        result = RegistrationService.confirm_email(db, student_id)
        raise_for_result(result)
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Email confirmation error: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)
