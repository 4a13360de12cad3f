from pydantic import BaseModel
from schemas.pin_schema import PINStatistics

class StudentStatistics(BaseModel):
    total: int
    pending: int
    active: int

class ProductStatistics(BaseModel):
    total: int
    active: int
    inactive: int

class DashboardStatistics(BaseModel):
    students: StudentStatistics
    products: ProductStatistics
    pins: PINStatistics
