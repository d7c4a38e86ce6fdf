from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TenantSettingsUpdate(BaseModel):
    allow_manager_approvals: Optional[bool] = None
    emergency_mode: Optional[bool] = None
    max_break_hours: Optional[float] = Field(default=None, ge=0)
