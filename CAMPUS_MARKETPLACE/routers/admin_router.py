from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from core.database import get_db
from core.errors import raise_for_result, GENERIC_RETRY_MESSAGE
from core.security import AdminContext, verify_admin_key
from models.student import StudentStatus
from models.student_pin import PINStatus
from schemas.admin_schema import DashboardStatistics
from schemas.pin_schema import (
    PINRangeCreateRequest, PINIndividualCreateRequest, PINStatusUpdateRequest, PINBulkDeleteRequest,
    PINCreateResult, PINResponse, PINStatusUpdateResult, PINDeleteResult, PINBulkDeleteResult, PINStatistics,
)
from schemas.product_schema import ProductStatusUpdateRequest, ProductResponse
from schemas.student_schema import StudentStatusUpdateRequest, StudentResponse
from services.admin_service import AdminService
from services.pin_allocation_service import PINAllocationService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin Panel"])


@router.post("/pins/range", response_model=PINCreateResult, status_code=201)
def create_pin_range(
    request: PINRangeCreateRequest,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(verify_admin_key),
):
    try:
        result = PINAllocationService.create_range(db, admin, request)
        raise_for_result(result)
        return result
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating PIN range: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.post("/pins/individual", response_model=PINCreateResult, status_code=201)
def create_individual_pins(
    request: PINIndividualCreateRequest,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(verify_admin_key),
):
    try:
        result = PINAllocationService.create_individual(db, admin, request)
        raise_for_result(result)
        return result
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating individual PINs: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.get("/pins", response_model=List[PINResponse])
def list_pins(
    joining_year: Optional[int] = Query(None),
    branch: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    section: Optional[str] = Query(None),
    status: Optional[PINStatus] = Query(None, description="available, registered, blocked"),
    db: Session = Depends(get_db),
    _: AdminContext = Depends(verify_admin_key),
):
    try:
        return PINAllocationService.list_pins(
            db, joining_year=joining_year, branch=branch, year=year, section=section, status=status,
        )
    except Exception as e:
        logger.error(f"Error listing PINs: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.get("/pins/statistics", response_model=PINStatistics)
def get_pin_statistics(db: Session = Depends(get_db), _: AdminContext = Depends(verify_admin_key)):
    try:
        return PINAllocationService.statistics(db)
    except Exception as e:
        logger.error(f"Error fetching PIN statistics: {str(e)}", exc_info=True)
        raise HTTPException(500, "Failed to fetch PIN statistics")


@router.post("/pins/bulk-delete", response_model=PINBulkDeleteResult)
def bulk_delete_pins(
    request: PINBulkDeleteRequest,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(verify_admin_key),
):
    try:
        return PINAllocationService.delete_pins_bulk(db, admin, request.pin_numbers)
    except Exception as e:
        logger.error(f"Error in bulk PIN delete: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.get("/pins/{pin_number}", response_model=PINResponse)
def get_pin(pin_number: str, db: Session = Depends(get_db), _: AdminContext = Depends(verify_admin_key)):
    result = PINAllocationService.get_pin(db, pin_number)
    if result.data is None:
        raise HTTPException(404, f"PIN {pin_number} not found")
    return result.data


@router.patch("/pins/{pin_number}/status", response_model=PINStatusUpdateResult)
def update_pin_status(
    pin_number: str,
    request: PINStatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(verify_admin_key),
):
    try:
        result = PINAllocationService.update_status(db, admin, pin_number, request.status)
        raise_for_result(result)
        return result
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating PIN status: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.delete("/pins/{pin_number}", response_model=PINDeleteResult)
def delete_pin(
    pin_number: str,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(verify_admin_key),
):
    try:
        result = PINAllocationService.delete_pin(db, admin, pin_number)
        if not result.success:
            raise HTTPException(500, result.model_dump(mode="json"))
        return result
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting PIN {pin_number}: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.get("/students", response_model=List[StudentResponse])
def list_students(
    status: Optional[StudentStatus] = Query(None, description="pending, active"),
    limit: int  = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _: AdminContext = Depends(verify_admin_key),
):
    try:
        return AdminService.list_students(db, status=status, limit=limit, offset=offset)
    except Exception as e:
        logger.error(f"Error fetching students: {str(e)}", exc_info=True)
        raise HTTPException(500, "Failed to fetch students")


@router.patch("/students/{student_id}/status", response_model=StudentResponse)
def update_student_status(
    student_id: int,
    request: StudentStatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(verify_admin_key),
):
    try:
        result = AdminService.set_student_status(db, admin, student_id, request.status)
        raise_for_result(result)
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating student status: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.patch("/products/{product_id}/status", response_model=ProductResponse)
def update_product_status(
    product_id: int,
    request: ProductStatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(verify_admin_key),
):
    try:
        result = AdminService.set_product_status(db, admin, product_id, request.status)
        raise_for_result(result)
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating product status: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.get("/stats/dashboard", response_model=DashboardStatistics)
def get_dashboard_stats(db: Session = Depends(get_db), _: AdminContext = Depends(verify_admin_key)):
    try:
        return AdminService.dashboard_statistics(db)
    except Exception as e:
        logger.error(f"Error fetching dashboard stats: {str(e)}", exc_info=True)
        raise HTTPException(500, "Failed to fetch statistics")
