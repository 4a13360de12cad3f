from sqlalchemy.orm import Session
from models.student import Student, StudentStatus
from typing import Optional, List

class StudentRepository:

    @staticmethod
    def get_by_id(db: Session, student_id: int) -> Optional[Student]:
        return db.query(Student).filter(Student.id == student_id).first()

    @staticmethod
    def get_by_pin_number(db: Session, pin_number: str) -> Optional[Student]:
        return db.query(Student).filter(Student.pin_number == pin_number).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Student]:
        return db.query(Student).filter(Student.email == email).first()

    @staticmethod
    def add_student(db: Session, student: Student) -> Student:
        db.add(student)
        db.flush()
        return student

    @staticmethod
    def update_student(db: Session, student: Student) -> Student:
        db.commit()
        db.refresh(student)
        return student

    @staticmethod
    def delete_student(db: Session, student: Student) -> None:
        db.delete(student)
        db.flush()

    @staticmethod
    def get_all_students(db: Session, limit: int = 50, offset: int = 0) -> List[Student]:
        return db.query(Student).order_by(
            Student.created_at.desc()
        ).offset(offset).limit(limit).all()

    @staticmethod
    def get_students_by_status(db: Session, status: StudentStatus, limit: int = 50, offset: int = 0) -> List[Student]:
        return db.query(Student).filter(
            Student.status == status
        ).order_by(Student.created_at.desc()).offset(offset).limit(limit).all()

    @staticmethod
    def count_all_students(db: Session) -> int:
        return db.query(Student).count()

    @staticmethod
    def count_by_status(db: Session, status: StudentStatus) -> int:
        return db.query(Student).filter(Student.status == status).count()
