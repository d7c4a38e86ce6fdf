from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..core.enums import Role


class EmployeeCreate(BaseModel):
    employee_code: str = Field(min_length=1, max_length=40)
    first_name: str = Field(min_length=1, max_length=80)
    last_name: str = Field(min_length=1, max_length=80)
    role: Role = Role.EMPLOYEE
    hourly_rate: float = Field(default=0, ge=0)
    email: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    location_id: Optional[int] = None
    team_id: Optional[int] = None
    manager_id: Optional[int] = None


class EmployeeQuery(BaseModel):
    department: Optional[str] = None
    role: Optional[Role] = None
    include_inactive: bool = False
