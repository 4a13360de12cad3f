import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from core.security import AdminContext
from models.product import ProductStatus
from models.student import StudentStatus
from repositories.product_repository import ProductRepository
from repositories.student_repository import StudentRepository
from schemas.admin_schema import DashboardStatistics, StudentStatistics, ProductStatistics
from schemas.pin_schema import ErrorType
from schemas.product_schema import ProductResponse, ProductResult
from schemas.student_schema import StudentResponse, RegistrationResult
from services.pin_allocation_service import PINAllocationService

logger = logging.getLogger(__name__)

class AdminService:

    @staticmethod
    def list_students(
        db: Session, status: Optional[StudentStatus] = None, limit: int = 50, offset: int = 0
    ) -> List[StudentResponse]:
        if status is not None:
            students = StudentRepository.get_students_by_status(db, status, limit, offset)
        else:
            students = StudentRepository.get_all_students(db, limit, offset)
        return [StudentResponse.model_validate(s) for s in students]

    @staticmethod
    def set_student_status(db: Session, admin: AdminContext, student_id: int, status: StudentStatus) -> RegistrationResult:
        student = StudentRepository.get_by_id(db, student_id)
        if not student:
            return RegistrationResult(success=False, error="Student not found", error_type=ErrorType.NOT_FOUND)

        previous = student.status
        student.status = status
        StudentRepository.update_student(db, student)
        logger.info(f"{admin.admin_name} changed student {student_id} status {previous.value} -> {status.value}")
        return RegistrationResult(success=True, data=StudentResponse.model_validate(student))

    @staticmethod
    def set_product_status(db: Session, admin: AdminContext, product_id: int, status: ProductStatus) -> ProductResult:
        product = ProductRepository.get_by_id(db, product_id)
        if not product:
            return ProductResult(success=False, error="Product not found", error_type=ErrorType.NOT_FOUND)

        product.status = status
        product = ProductRepository.update_product(db, product)
        logger.info(f"{admin.admin_name} set product {product_id} status to {status.value}")
        return ProductResult(success=True, data=ProductResponse.model_validate(product))

    @staticmethod
    def dashboard_statistics(db: Session) -> DashboardStatistics:
        return DashboardStatistics(
            students=StudentStatistics(
                total=StudentRepository.count_all_students(db),
                pending=StudentRepository.count_by_status(db, StudentStatus.PENDING),
                active=StudentRepository.count_by_status(db, StudentStatus.ACTIVE),
            ),
            products=ProductStatistics(
                total=ProductRepository.count_all(db),
                active=ProductRepository.count_by_status(db, ProductStatus.ACTIVE),
                inactive=ProductRepository.count_by_status(db, ProductStatus.INACTIVE),
            ),
            pins=PINAllocationService.statistics(db),
        )
