from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Integer, Boolean, BigInteger, ForeignKey, Enum as SQLEnum, Index
from sqlalchemy.orm import relationship
from core.database import Base
import enum

class StudentStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE  = "active"

class Student(Base):
    __tablename__ = "students"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    pin_number = Column(String(30), ForeignKey("student_pins.pin_number"), unique=True, nullable=False, index=True)
    full_name = Column(String(150), nullable=False)
    email = Column(String(120), unique=True, nullable=False, index=True)
    phone_number = Column(String(20), nullable=False)
    whatsapp_number = Column(String(20), nullable=True)
    joining_year = Column(Integer, nullable=False)
    branch = Column(String(10), nullable=False)
    year = Column(Integer, nullable=False)
    section = Column(String(10), nullable=False)
    status = Column(
        SQLEnum(StudentStatus, values_callable=lambda e: [m.value for m in e], name="student_status"),
        default=StudentStatus.PENDING,
        nullable=False,
    )
    email_confirmed = Column(Boolean, default=False, nullable=False)
    email_confirmed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    pin = relationship("StudentPIN", back_populates="student")
    products = relationship(
        "Product", back_populates="seller",
        cascade="all, delete-orphan", passive_deletes=True, lazy="select",
    )

    __table_args__ = (
        Index("idx_student_status", "status"),
    )
