from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ClockIn(BaseModel):
    assignment_id: Optional[int] = None


class ClockOut(BaseModel):
    notes: Optional[str] = None
