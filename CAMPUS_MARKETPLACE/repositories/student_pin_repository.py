from sqlalchemy import insert, update
from sqlalchemy.orm import Session
from models.student_pin import StudentPIN, PINStatus
from typing import List, Optional

class StudentPINRepository:

    @staticmethod
    def get_by_pin_number(db: Session, pin_number: str) -> Optional[StudentPIN]:
        return db.query(StudentPIN).filter(StudentPIN.pin_number == pin_number).first()

    @staticmethod
    def insert_many(db: Session, rows: List[dict]) -> int:
        # Core insert so duplicate keys surface from the store, not the identity map
        db.execute(insert(StudentPIN), rows)
        return len(rows)

    @staticmethod
    def distinct_available_joining_years(db: Session) -> List[int]:
        rows = db.query(StudentPIN.joining_year).filter(
            StudentPIN.status == PINStatus.AVAILABLE
        ).distinct().order_by(StudentPIN.joining_year.desc()).all()
        return [row[0] for row in rows]

    @staticmethod
    def distinct_available_branches(db: Session, joining_year: int) -> List[str]:
        rows = db.query(StudentPIN.branch).filter(
            StudentPIN.status == PINStatus.AVAILABLE,
            StudentPIN.joining_year == joining_year,
        ).distinct().order_by(StudentPIN.branch.asc()).all()
        return [row[0] for row in rows]

    @staticmethod
    def distinct_available_years(db: Session, joining_year: int, branch: str) -> List[int]:
        rows = db.query(StudentPIN.year).filter(
            StudentPIN.status == PINStatus.AVAILABLE,
            StudentPIN.joining_year == joining_year,
            StudentPIN.branch == branch,
        ).distinct().order_by(StudentPIN.year.asc()).all()
        return [row[0] for row in rows]

    @staticmethod
    def distinct_available_sections(db: Session, joining_year: int, branch: str, year: int) -> List[str]:
        rows = db.query(StudentPIN.section).filter(
            StudentPIN.status == PINStatus.AVAILABLE,
            StudentPIN.joining_year == joining_year,
            StudentPIN.branch == branch,
            StudentPIN.year == year,
        ).distinct().order_by(StudentPIN.section.asc()).all()
        return [row[0] for row in rows]

    @staticmethod
    def get_available(db: Session, joining_year: int, branch: str, year: int, section: str) -> List[StudentPIN]:
        return db.query(StudentPIN).filter(
            StudentPIN.status == PINStatus.AVAILABLE,
            StudentPIN.joining_year == joining_year,
            StudentPIN.branch == branch,
            StudentPIN.year == year,
            StudentPIN.section == section,
        ).order_by(StudentPIN.pin_sequence.asc()).all()

    @staticmethod
    def get_all(
        db: Session,
        joining_year: Optional[int] = None,
        branch: Optional[str] = None,
        year: Optional[int] = None,
        section: Optional[str] = None,
        status: Optional[PINStatus] = None,
    ) -> List[StudentPIN]:
        query = db.query(StudentPIN)
        if joining_year is not None:
            query = query.filter(StudentPIN.joining_year == joining_year)
        if branch:
            query = query.filter(StudentPIN.branch == branch)
        if year is not None:
            query = query.filter(StudentPIN.year == year)
        if section:
            query = query.filter(StudentPIN.section == section)
        if status is not None:
            query = query.filter(StudentPIN.status == status)
        return query.order_by(StudentPIN.created_at.desc(), StudentPIN.pin_sequence.asc()).all()

    @staticmethod
    def get_statistics_rows(db: Session) -> list:
        return db.query(
            StudentPIN.joining_year,
            StudentPIN.branch,
            StudentPIN.section,
            StudentPIN.status,
        ).all()

    @staticmethod
    def claim(db: Session, pin_number: str) -> bool:
        result = db.execute(
            update(StudentPIN)
            .where(StudentPIN.pin_number == pin_number, StudentPIN.status == PINStatus.AVAILABLE)
            .values(status=PINStatus.REGISTERED)
        )
        return result.rowcount == 1

    @staticmethod
    def update_pin(db: Session, pin: StudentPIN) -> StudentPIN:
        db.commit()
        db.refresh(pin)
        return pin

    @staticmethod
    def delete_pin(db: Session, pin: StudentPIN) -> None:
        db.delete(pin)
        db.flush()

    @staticmethod
    def count_all(db: Session) -> int:
        return db.query(StudentPIN).count()

    @staticmethod
    def count_by_status(db: Session, status: PINStatus) -> int:
        return db.query(StudentPIN).filter(StudentPIN.status == status).count()
