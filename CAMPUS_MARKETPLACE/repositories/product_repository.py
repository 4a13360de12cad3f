from sqlalchemy import or_
from sqlalchemy.orm import Session
from models.product import Product, ProductStatus
from typing import List, Optional

class ProductRepository:

    @staticmethod
    def get_by_id(db: Session, product_id: int) -> Optional[Product]:
        return db.query(Product).filter(Product.id == product_id).first()

    @staticmethod
    def get_active(db: Session) -> List[Product]:
        return db.query(Product).filter(
            Product.status == ProductStatus.ACTIVE
        ).order_by(Product.created_at.desc(), Product.id.desc()).all()

    @staticmethod
    def get_by_seller(db: Session, seller_id: int) -> List[Product]:
        return db.query(Product).filter(
            Product.seller_id == seller_id
        ).order_by(Product.created_at.desc()).all()

    @staticmethod
    def _seller_filter(seller_id: int, pin_number: str):
        return or_(Product.seller_id == seller_id, Product.student_pin_number == pin_number)

    @staticmethod
    def count_for_seller(db: Session, seller_id: int, pin_number: str) -> int:
        return db.query(Product).filter(
            ProductRepository._seller_filter(seller_id, pin_number)
        ).count()

    @staticmethod
    def delete_for_seller(db: Session, seller_id: int, pin_number: str) -> int:
        count = db.query(Product).filter(
            ProductRepository._seller_filter(seller_id, pin_number)
        ).delete(synchronize_session="fetch")
        db.flush()
        return count

    @staticmethod
    def create_product(db: Session, product: Product) -> Product:
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def update_product(db: Session, product: Product) -> Product:
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def count_all(db: Session) -> int:
        return db.query(Product).count()

    @staticmethod
    def count_by_status(db: Session, status: ProductStatus) -> int:
        return db.query(Product).filter(Product.status == status).count()
