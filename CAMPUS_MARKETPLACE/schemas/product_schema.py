from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
from core.config import BRANCH_CODES, MAX_IMAGES_PER_PRODUCT
from models.product import ProductCategory, ProductStatus
from schemas.pin_schema import ErrorType

class SortOrder(str, Enum):
    NONE       = "none"
    NEWEST     = "newest"
    PRICE_ASC  = "price-asc"
    PRICE_DESC = "price-desc"

SORT_ORDER_ALIASES = {
    "": SortOrder.NONE,
    "price-low-high": SortOrder.PRICE_ASC,
    "price-high-low": SortOrder.PRICE_DESC,
}


class ListingQuery(BaseModel):
    search_query: str = ""
    selected_categories: List[str] = []
    selected_branches: List[str] = []
    selected_price_range: str = "all"
    show_free_only: bool = False
    sort_order: SortOrder = SortOrder.NONE
    search_fields: List[str] = ["title", "description"]

    @field_validator("search_query", mode="before")
    @classmethod
    def validate_search_query(cls, v):
        return "" if v is None else v

    @field_validator("selected_categories", "selected_branches", mode="before")
    @classmethod
    def validate_facets(cls, v):
        if v is None:
            return []
        if isinstance(v, (set, frozenset)):
            return sorted(v)
        if isinstance(v, (list, tuple)):
            return list(dict.fromkeys(v))
        return v

    @field_validator("selected_branches")
    @classmethod
    def validate_selected_branches(cls, v):
        # listings store branch codes upper-case
        branches = (branch.strip().upper() for branch in v)
        return list(dict.fromkeys(branch for branch in branches if branch))

    @field_validator("selected_price_range", mode="before")
    @classmethod
    def validate_price_range(cls, v):
        return "all" if v in (None, "") else v

    @field_validator("sort_order", mode="before")
    @classmethod
    def validate_sort_order(cls, v):
        if v is None:
            return SortOrder.NONE
        if isinstance(v, str) and v in SORT_ORDER_ALIASES:
            return SORT_ORDER_ALIASES[v]
        return v


def _normalize_branch(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip().upper()
    if not v or v == "ALL":
        return None
    if v not in BRANCH_CODES:
        raise ValueError(f"Invalid branch. Must be one of: {', '.join(BRANCH_CODES)}")
    return v


class ProductCreateRequest(BaseModel):
    seller_id: int
    title: str = Field(..., min_length=2, max_length=200)
    description: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    category: ProductCategory
    branch: Optional[str] = None
    image_urls: List[str] = Field(..., min_length=1, max_length=MAX_IMAGES_PER_PRODUCT)

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("branch")
    @classmethod
    def validate_branch(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_branch(v)

    @field_validator("image_urls")
    @classmethod
    def validate_image_urls(cls, v: List[str]) -> List[str]:
        urls = [url.strip() for url in v if url and url.strip()]
        if not urls:
            raise ValueError("Please upload at least one image")
        return urls


class ProductUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[int] = Field(None, ge=0)
    category: Optional[ProductCategory] = None
    branch: Optional[str] = None
    image_urls: Optional[List[str]] = Field(None, min_length=1, max_length=MAX_IMAGES_PER_PRODUCT)

    @field_validator("branch")
    @classmethod
    def validate_branch(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_branch(v)


class ProductStatusUpdateRequest(BaseModel):
    status: ProductStatus


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int
    seller_id: int
    student_pin_number: str
    title: str
    description: str
    price: int
    category: ProductCategory
    branch: Optional[str] = None
    image_urls: List[str]
    status: ProductStatus
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProductResult(BaseModel):
    success: bool
    data: Optional[ProductResponse] = None
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None


class ProductBrowseResponse(BaseModel):
    items: List[ProductResponse]
    total: int
    active_filter_count: int
