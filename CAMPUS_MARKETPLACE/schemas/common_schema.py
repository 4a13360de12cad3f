from pydantic import BaseModel
from typing import Any, List, Optional

class AvailabilityResult(BaseModel):
    success: bool
    data: List[Any] = []
    error: Optional[str] = None
