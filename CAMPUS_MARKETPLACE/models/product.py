from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, Integer, BigInteger, ForeignKey, JSON, Enum as SQLEnum, Index, CheckConstraint
from sqlalchemy.orm import relationship
from core.database import Base
import enum

class ProductCategory(str, enum.Enum):
    BOOKS       = "books"
    STATIONARY  = "stationary"
    ELECTRONICS = "electronics"
    OTHERS      = "others"

class ProductStatus(str, enum.Enum):
    ACTIVE   = "active"
    INACTIVE = "inactive"

class Product(Base):
    __tablename__ = "products"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    seller_id = Column(BigInteger, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    student_pin_number = Column(String(30), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False, default=0)
    category = Column(
        SQLEnum(ProductCategory, values_callable=lambda e: [m.value for m in e], name="product_category"),
        nullable=False,
    )
    # NULL branch = visible to every branch
    branch = Column(String(10), nullable=True)
    image_urls = Column(JSON, nullable=False, default=list)
    status = Column(
        SQLEnum(ProductStatus, values_callable=lambda e: [m.value for m in e], name="product_status"),
        default=ProductStatus.ACTIVE,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    seller = relationship("Student", back_populates="products")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        Index("idx_product_status", "status"),
        Index("idx_product_category", "category"),
    )
