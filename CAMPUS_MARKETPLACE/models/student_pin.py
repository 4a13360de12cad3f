from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Integer, Enum as SQLEnum, Index
from sqlalchemy.orm import relationship
from core.database import Base
from core.config import INSTITUTION_CODE, PIN_SEQUENCE_WIDTH
import enum

class PINStatus(str, enum.Enum):
    AVAILABLE  = "available"
    REGISTERED = "registered"
    BLOCKED    = "blocked"


def format_pin_number(joining_year: int, branch: str, sequence: int) -> str:
    year_code = f"{joining_year % 100:02d}"
    return f"{year_code}{INSTITUTION_CODE}-{branch}-{sequence:0{PIN_SEQUENCE_WIDTH}d}"


class StudentPIN(Base):
    __tablename__ = "student_pins"

    pin_number = Column(String(30), primary_key=True)
    joining_year = Column(Integer, nullable=False)
    branch = Column(String(10), nullable=False)
    year = Column(Integer, nullable=False)
    section = Column(String(10), nullable=False)
    pin_sequence = Column(Integer, nullable=False)
    status = Column(
        SQLEnum(PINStatus, values_callable=lambda e: [m.value for m in e], name="pin_status"),
        default=PINStatus.AVAILABLE,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    student = relationship("Student", back_populates="pin", uselist=False, passive_deletes=True)

    __table_args__ = (
        Index("idx_pin_scope", "joining_year", "branch", "year", "section", "status"),
        Index("idx_pin_status", "status"),
    )
