from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from core.database import get_db
from core.errors import raise_for_result, GENERIC_RETRY_MESSAGE
from schemas.product_schema import (
    ListingQuery, ProductCreateRequest, ProductUpdateRequest,
    ProductResponse, ProductBrowseResponse, SortOrder,
)
from services.product_service import ProductService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/products", tags=["Products"])

@router.get("", response_model=ProductBrowseResponse)
def browse_products(
    search: str = Query("", description="Matches title or description"),
    category: List[str] = Query([], description="books, stationary, electronics, others"),
    branch: List[str] = Query([], description="Branch codes; listings for all branches always match"),
    price_range: str = Query("all", description="all, 0, 1-100, 100-500, 500-1000, 1000-5000, 5000+"),
    free_only: bool = Query(False),
    sort: Optional[str] = Query(None, description="none, newest, price-asc, price-desc"),
    db: Session = Depends(get_db),
):
    try:
        query = ListingQuery(
            search_query=search,
            selected_categories=category,
            selected_branches=branch,
            selected_price_range=price_range,
            show_free_only=free_only,
            sort_order=sort or SortOrder.NONE,
        )
    except ValueError as e:
        raise HTTPException(400, str(e))

    try:
        return ProductService.browse_products(db, query)
    except Exception as e:
        logger.error(f"Browse error: {str(e)}", exc_info=True)
        raise HTTPException(500, "Failed to fetch products")


@router.post("", response_model=ProductResponse, status_code=201)
def create_product(request: ProductCreateRequest, db: Session = Depends(get_db)):
    try:
        result = ProductService.create_product(db, request)
        raise_for_result(result)
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Create product error: {str(e)}", exc_info=True)
        raise HTTPException(500, "Failed to create product. Please try again.")


@router.get("/seller/{seller_id}", response_model=List[ProductResponse])
def list_seller_products(seller_id: int, db: Session = Depends(get_db)):
    return ProductService.list_seller_products(db, seller_id)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    result = ProductService.get_product(db, product_id)
    raise_for_result(result)
    return result.data


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    seller_id: int = Query(..., description="Seller ID for authorization"),
    db: Session = Depends(get_db),
):
    try:
        result = ProductService.update_product(db, product_id, seller_id, request)
        raise_for_result(result)
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Update product error: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)


@router.delete("/{product_id}", response_model=ProductResponse)
def delete_product(
    product_id: int,
    seller_id: int = Query(..., description="Seller ID for authorization"),
    db: Session = Depends(get_db),
):
    try:
        result = ProductService.deactivate_product(db, product_id, seller_id)
        raise_for_result(result)
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Delete product error: {str(e)}", exc_info=True)
        raise HTTPException(500, GENERIC_RETRY_MESSAGE)
