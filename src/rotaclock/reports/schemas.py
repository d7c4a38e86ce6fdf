from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel


class AttendanceQuery(BaseModel):
    start_date: date
    end_date: date
    employee_id: Optional[int] = None
