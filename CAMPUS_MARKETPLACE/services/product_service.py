import logging
from typing import List
from sqlalchemy.orm import Session
from models.product import Product, ProductStatus
from models.student import StudentStatus
from repositories.product_repository import ProductRepository
from repositories.student_repository import StudentRepository
from schemas.pin_schema import ErrorType
from schemas.product_schema import (
    ListingQuery, ProductCreateRequest, ProductUpdateRequest,
    ProductResponse, ProductResult, ProductBrowseResponse,
)
from utils.product_filters import filter_listings, active_filter_count

logger = logging.getLogger(__name__)

class ProductService:

    @staticmethod
    def create_product(db: Session, request: ProductCreateRequest) -> ProductResult:
        seller = StudentRepository.get_by_id(db, request.seller_id)
        if not seller:
            return ProductResult(success=False, error="Seller not found", error_type=ErrorType.NOT_FOUND)
        if seller.status != StudentStatus.ACTIVE:
            return ProductResult(
                success=False,
                error="Please confirm your email before creating a post.",
                error_type=ErrorType.VALIDATION,
            )

        product = Product(
            seller_id          = seller.id,
            student_pin_number = seller.pin_number,
            title              = request.title,
            description        = request.description,
            price              = request.price,
            category           = request.category,
            branch             = request.branch,
            image_urls         = request.image_urls,
            status             = ProductStatus.ACTIVE,
        )
        product = ProductRepository.create_product(db, product)
        logger.info(f"Product {product.id} created by student {seller.id}")
        return ProductResult(success=True, data=ProductResponse.model_validate(product))

    @staticmethod
    def browse_products(db: Session, query: ListingQuery) -> ProductBrowseResponse:
        listings = [ProductResponse.model_validate(p) for p in ProductRepository.get_active(db)]
        items = filter_listings(listings, query)
        return ProductBrowseResponse(
            items=items,
            total=len(items),
            active_filter_count=active_filter_count(query),
        )

    @staticmethod
    def get_product(db: Session, product_id: int) -> ProductResult:
        product = ProductRepository.get_by_id(db, product_id)
        if not product:
            return ProductResult(success=False, error="Product not found", error_type=ErrorType.NOT_FOUND)
        return ProductResult(success=True, data=ProductResponse.model_validate(product))

    @staticmethod
    def list_seller_products(db: Session, seller_id: int) -> List[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in ProductRepository.get_by_seller(db, seller_id)]

    @staticmethod
    def update_product(db: Session, product_id: int, seller_id: int, request: ProductUpdateRequest) -> ProductResult:
        product = ProductRepository.get_by_id(db, product_id)
        if not product or product.seller_id != seller_id:
            return ProductResult(success=False, error="Product not found", error_type=ErrorType.NOT_FOUND)

        updates = request.model_dump(exclude_unset=True)
        if not updates:
            return ProductResult(success=False, error="No fields provided for update", error_type=ErrorType.VALIDATION)

        for field, value in updates.items():
            # only branch may be cleared (null = all branches)
            if value is None and field != "branch":
                continue
            if field in ("title", "description"):
                value = value.strip()
            setattr(product, field, value)

        product = ProductRepository.update_product(db, product)
        logger.info(f"Product {product_id} updated: {sorted(updates)}")
        return ProductResult(success=True, data=ProductResponse.model_validate(product))

    @staticmethod
    def deactivate_product(db: Session, product_id: int, seller_id: int) -> ProductResult:
        product = ProductRepository.get_by_id(db, product_id)
        if not product or product.seller_id != seller_id:
            return ProductResult(success=False, error="Product not found", error_type=ErrorType.NOT_FOUND)

        product.status = ProductStatus.INACTIVE
        product = ProductRepository.update_product(db, product)
        logger.info(f"Product {product_id} deactivated by seller {seller_id}")
        return ProductResult(success=True, data=ProductResponse.model_validate(product))
