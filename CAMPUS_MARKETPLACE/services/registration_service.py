import logging
from datetime import datetime, timezone
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from models.student import Student, StudentStatus
from models.student_pin import PINStatus
from repositories.student_pin_repository import StudentPINRepository
from repositories.student_repository import StudentRepository
from schemas.pin_schema import ErrorType
from schemas.student_schema import StudentRegistrationRequest, StudentResponse, RegistrationResult

logger = logging.getLogger(__name__)

class RegistrationService:

    @staticmethod
    def register_student(db: Session, request: StudentRegistrationRequest) -> RegistrationResult:
        pin = StudentPINRepository.get_by_pin_number(db, request.pin_number)
        if not pin:
            return RegistrationResult(
                success=False,
                error="Invalid PIN number. Please select a valid PIN.",
                error_type=ErrorType.NOT_FOUND,
            )
        if pin.status != PINStatus.AVAILABLE:
            return RegistrationResult(
                success=False,
                error="This PIN is not available. Please select a different PIN.",
                error_type=ErrorType.CONFLICT,
            )
        if StudentRepository.get_by_email(db, request.email):
            return RegistrationResult(
                success=False,
                error="This email is already registered. Please use a different email or try logging in.",
                error_type=ErrorType.CONFLICT,
            )

        student = Student(
            pin_number      = pin.pin_number,
            full_name       = request.full_name,
            email           = request.email,
            phone_number    = request.phone_number,
            whatsapp_number = request.whatsapp_number,
            joining_year    = pin.joining_year,
            branch          = pin.branch,
            year            = pin.year,
            section         = pin.section,
            status          = StudentStatus.PENDING,
        )

        try:
            # claim only succeeds while the PIN is still available
            if not StudentPINRepository.claim(db, pin.pin_number):
                db.rollback()
                return RegistrationResult(
                    success=False,
                    error="This PIN was just registered by someone else. Please select a different PIN.",
                    error_type=ErrorType.CONFLICT,
                )
            StudentRepository.add_student(db, student)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Registration for PIN {request.pin_number} rejected by store: {e.orig}")
            return RegistrationResult(
                success=False,
                error="This PIN or email is already registered.",
                error_type=ErrorType.CONFLICT,
            )
        except SQLAlchemyError:
            db.rollback()
            raise

        db.refresh(student)
        logger.info(f"Student {student.id} registered with PIN {student.pin_number} (pending email confirmation)")
        return RegistrationResult(success=True, data=StudentResponse.model_validate(student))

    @staticmethod
    def confirm_email(db: Session, student_id: int) -> RegistrationResult:
        student = StudentRepository.get_by_id(db, student_id)
        if not student:
            return RegistrationResult(success=False, error="Student not found", error_type=ErrorType.NOT_FOUND)

        if not student.email_confirmed:
            student.email_confirmed = True
            student.email_confirmed_at = datetime.now(timezone.utc)
        if student.status == StudentStatus.PENDING:
            student.status = StudentStatus.ACTIVE
            logger.info(f"Student {student.id} activated after email confirmation")

        StudentRepository.update_student(db, student)
        return RegistrationResult(success=True, data=StudentResponse.model_validate(student))
