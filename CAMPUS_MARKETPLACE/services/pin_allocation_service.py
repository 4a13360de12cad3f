import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from core.config import CASCADE_DELETE_MODE
from core.security import AdminContext
from models.student_pin import PINStatus, format_pin_number
from repositories.student_pin_repository import StudentPINRepository
from repositories.student_repository import StudentRepository
from repositories.product_repository import ProductRepository
from schemas.pin_schema import (
    PINScopeRequest, PINRangeCreateRequest, PINIndividualCreateRequest,
    PINCreateResult, PINQueryResult, PINResponse, PINStatusUpdateResult,
    PINDeleteResult, PINBulkDeleteResult, DeletedSummary, PINStatistics,
    ErrorType, DeleteStep,
)
from schemas.common_schema import AvailabilityResult
from utils.parsing import parse_leading_int

logger = logging.getLogger(__name__)


def _normalize_code(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip().upper()
    return value or None


def _any_missing(*keys) -> bool:
    return any(key is None or key == "" or key == 0 for key in keys)


class PINAllocationService:

    @staticmethod
    def _build_rows(request: PINScopeRequest, sequences: Iterable[int]) -> List[dict]:
        now = datetime.now(timezone.utc)
        return [
            {
                "pin_number":   format_pin_number(request.joining_year, request.branch, sequence),
                "joining_year": request.joining_year,
                "branch":       request.branch,
                "year":         request.year,
                "section":      request.section,
                "pin_sequence": sequence,
                "status":       PINStatus.AVAILABLE,
                "created_at":   now,
            }
            for sequence in sequences
        ]

    @staticmethod
    def _insert_rows(db: Session, admin: AdminContext, rows: List[dict], method: str) -> PINCreateResult:
        try:
            count = StudentPINRepository.insert_many(db, rows)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"PIN {method} creation by {admin.admin_name} rejected, no PINs created: {e.orig}")
            return PINCreateResult(
                success=False,
                error=f"One or more PIN numbers already exist. No PINs were created. ({e.orig})",
                error_type=ErrorType.CONFLICT,
            )
        except SQLAlchemyError:
            db.rollback()
            raise

        pin_numbers = [row["pin_number"] for row in rows]
        logger.info(
            f"{admin.admin_name} created {count} PIN(s) via {method}: "
            f"{pin_numbers[0]} .. {pin_numbers[-1]}"
        )
        return PINCreateResult(success=True, count=count, pin_numbers=pin_numbers)

    @staticmethod
    def create_range(db: Session, admin: AdminContext, request: PINRangeCreateRequest) -> PINCreateResult:
        sequences = range(request.start_sequence, request.end_sequence + 1)
        rows = PINAllocationService._build_rows(request, sequences)
        return PINAllocationService._insert_rows(db, admin, rows, "range")

    @staticmethod
    def create_individual(db: Session, admin: AdminContext, request: PINIndividualCreateRequest) -> PINCreateResult:
        sequences = []
        for raw in request.pin_sequences:
            sequence = parse_leading_int(raw)
            if sequence is None or sequence < 1:
                logger.debug(f"Dropping invalid PIN sequence {raw!r}")
                continue
            sequences.append(sequence)

        if not sequences:
            return PINCreateResult(
                success=False,
                error="No valid PIN numbers provided",
                error_type=ErrorType.VALIDATION,
            )

        rows = PINAllocationService._build_rows(request, sequences)
        return PINAllocationService._insert_rows(db, admin, rows, "individual")

    @staticmethod
    def available_joining_years(db: Session) -> AvailabilityResult:
        return AvailabilityResult(success=True, data=StudentPINRepository.distinct_available_joining_years(db))

    @staticmethod
    def available_branches(db: Session, joining_year: Optional[int]) -> AvailabilityResult:
        if _any_missing(joining_year):
            return AvailabilityResult(success=True, data=[])
        return AvailabilityResult(
            success=True,
            data=StudentPINRepository.distinct_available_branches(db, joining_year),
        )

    @staticmethod
    def available_years(db: Session, joining_year: Optional[int], branch: Optional[str]) -> AvailabilityResult:
        branch = _normalize_code(branch)
        if _any_missing(joining_year, branch):
            return AvailabilityResult(success=True, data=[])
        return AvailabilityResult(
            success=True,
            data=StudentPINRepository.distinct_available_years(db, joining_year, branch),
        )

    @staticmethod
    def available_sections(
        db: Session, joining_year: Optional[int], branch: Optional[str], year: Optional[int]
    ) -> AvailabilityResult:
        branch = _normalize_code(branch)
        if _any_missing(joining_year, branch, year):
            return AvailabilityResult(success=True, data=[])
        return AvailabilityResult(
            success=True,
            data=StudentPINRepository.distinct_available_sections(db, joining_year, branch, year),
        )

    @staticmethod
    def available_pins(
        db: Session,
        joining_year: Optional[int],
        branch: Optional[str],
        year: Optional[int],
        section: Optional[str],
    ) -> AvailabilityResult:
        branch = _normalize_code(branch)
        section = _normalize_code(section)
        if _any_missing(joining_year, branch, year, section):
            return AvailabilityResult(success=True, data=[])
        pins = StudentPINRepository.get_available(db, joining_year, branch, year, section)
        return AvailabilityResult(success=True, data=[PINResponse.model_validate(pin) for pin in pins])

    @staticmethod
    def get_pin(db: Session, pin_number: str) -> PINQueryResult:
        pin = StudentPINRepository.get_by_pin_number(db, pin_number.strip())
        if not pin:
            return PINQueryResult(success=True, data=None)
        return PINQueryResult(success=True, data=PINResponse.model_validate(pin))

    @staticmethod
    def list_pins(
        db: Session,
        joining_year: Optional[int] = None,
        branch: Optional[str] = None,
        year: Optional[int] = None,
        section: Optional[str] = None,
        status: Optional[PINStatus] = None,
    ) -> List[PINResponse]:
        pins = StudentPINRepository.get_all(
            db,
            joining_year=joining_year,
            branch=_normalize_code(branch),
            year=year,
            section=_normalize_code(section),
            status=status,
        )
        return [PINResponse.model_validate(pin) for pin in pins]

    @staticmethod
    def update_status(db: Session, admin: AdminContext, pin_number: str, status: PINStatus) -> PINStatusUpdateResult:
        pin = StudentPINRepository.get_by_pin_number(db, pin_number)
        if not pin:
            return PINStatusUpdateResult(
                success=False, pin_number=pin_number,
                error="PIN not found", error_type=ErrorType.NOT_FOUND,
            )

        if status == PINStatus.REGISTERED or pin.status == PINStatus.REGISTERED:
            return PINStatusUpdateResult(
                success=False, pin_number=pin_number, status=pin.status,
                error="Registered status is managed by registration and PIN deletion only",
                error_type=ErrorType.VALIDATION,
            )

        previous = pin.status
        pin.status = status
        StudentPINRepository.update_pin(db, pin)
        logger.info(f"{admin.admin_name} changed PIN {pin_number} status {previous.value} -> {status.value}")
        return PINStatusUpdateResult(success=True, pin_number=pin_number, status=pin.status)

    @staticmethod
    def delete_pin(db: Session, admin: AdminContext, pin_number: str) -> PINDeleteResult:
        stepwise = CASCADE_DELETE_MODE == "stepwise"
        step = DeleteStep.LOOKUP
        student_deleted = False
        products_count = 0

        try:
            pin = StudentPINRepository.get_by_pin_number(db, pin_number)
            student = StudentRepository.get_by_pin_number(db, pin_number)

            if pin is None and student is None:
                logger.info(f"Delete requested for unknown PIN {pin_number}, nothing to do")
                return PINDeleteResult(
                    success=True,
                    deleted=DeletedSummary(pin_number=pin_number, pin_deleted=False, student=False),
                )

            if student is not None:
                step = DeleteStep.PRODUCTS
                products_count = ProductRepository.count_for_seller(db, student.id, pin_number)
                ProductRepository.delete_for_seller(db, student.id, pin_number)

                # listings and account share one commit
                step = DeleteStep.STUDENT
                StudentRepository.delete_student(db, student)
                if stepwise:
                    db.commit()
                    student_deleted = True

            if pin is not None:
                step = DeleteStep.PIN
                StudentPINRepository.delete_pin(db, pin)

            db.commit()

        except SQLAlchemyError as e:
            db.rollback()
            if student_deleted:
                logger.critical(
                    f"PARTIAL DELETE for PIN {pin_number} by {admin.admin_name}: student account and "
                    f"{products_count} listing(s) deleted but the PIN row remains: {e}"
                )
                return PINDeleteResult(
                    success=False,
                    deleted=DeletedSummary(
                        pin_number=pin_number, pin_deleted=False,
                        student=True, products_count=products_count,
                    ),
                    error=(
                        f"Student account and {products_count} listing(s) were deleted, "
                        f"but PIN {pin_number} could not be deleted: {e}"
                    ),
                    error_type=ErrorType.PARTIAL_FAILURE,
                    failed_step=step,
                    partial_failure=True,
                )

            logger.error(f"Delete of PIN {pin_number} failed at step '{step.value}': {e}", exc_info=True)
            return PINDeleteResult(
                success=False,
                error=f"Failed to delete {step.value} for PIN {pin_number}: {e}",
                error_type=ErrorType.STORE,
                failed_step=step,
            )

        logger.info(
            f"{admin.admin_name} deleted PIN {pin_number} "
            f"(student={student is not None}, listings={products_count})"
        )
        return PINDeleteResult(
            success=True,
            deleted=DeletedSummary(
                pin_number=pin_number,
                pin_deleted=pin is not None,
                student=student is not None,
                products_count=products_count,
            ),
        )

    @staticmethod
    def delete_pins_bulk(db: Session, admin: AdminContext, pin_numbers: List[str]) -> PINBulkDeleteResult:
        unique_pins = list(dict.fromkeys(p.strip() for p in pin_numbers if p and p.strip()))
        results = [PINAllocationService.delete_pin(db, admin, pin_number) for pin_number in unique_pins]

        succeeded = [r for r in results if r.success]
        summary = PINBulkDeleteResult(
            total=len(results),
            succeeded=len(succeeded),
            failed=len(results) - len(succeeded),
            students_deleted=sum(1 for r in results if r.deleted and r.deleted.student),
            products_deleted=sum(r.deleted.products_count for r in results if r.deleted),
            partial_failures=[r.deleted.pin_number for r in results if r.partial_failure and r.deleted],
            results=results,
        )
        logger.info(
            f"Bulk delete by {admin.admin_name}: {summary.succeeded}/{summary.total} succeeded, "
            f"{summary.students_deleted} students, {summary.products_deleted} listings removed"
        )
        return summary

    @staticmethod
    def statistics(db: Session) -> PINStatistics:
        rows = StudentPINRepository.get_statistics_rows(db)

        joining_years = sorted({row.joining_year for row in rows if row.joining_year}, reverse=True)
        branches = sorted({row.branch for row in rows if row.branch})
        sections = sorted({row.section for row in rows if row.section})

        return PINStatistics(
            total_pins=len(rows),
            available_pins=sum(1 for row in rows if row.status == PINStatus.AVAILABLE),
            registered_pins=sum(1 for row in rows if row.status == PINStatus.REGISTERED),
            blocked_pins=sum(1 for row in rows if row.status == PINStatus.BLOCKED),
            joining_years_count=len(joining_years),
            branches_count=len(branches),
            sections_count=len(sections),
            joining_years=joining_years,
            branches=branches,
            sections=sections,
        )
