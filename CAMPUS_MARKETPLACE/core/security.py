from datetime import datetime, timezone
from fastapi import Header, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from core.config import ADMIN_API_KEY, ADMIN_NAME


class AdminContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    admin_name: str
    authenticated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def verify_admin_key(
    x_admin_key: str = Header(..., description="Admin API key"),
    x_admin_name: str | None = Header(None, description="Name recorded in audit logs"),
) -> AdminContext:
    if not ADMIN_API_KEY or x_admin_key != ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Invalid admin API key")
    return AdminContext(admin_name=x_admin_name or ADMIN_NAME)
