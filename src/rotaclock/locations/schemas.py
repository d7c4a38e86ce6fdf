from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    description: Optional[str] = Field(default=None, max_length=255)


class LocationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    description: Optional[str] = Field(default=None, max_length=255)
    is_active: Optional[bool] = None


class LocationQuery(BaseModel):
    include_inactive: bool = False


class ManagerLocationCreate(BaseModel):
    manager_id: int = Field(gt=0)
    location_id: int = Field(gt=0)


class ManagerLocationDelete(BaseModel):
    id: int = Field(gt=0)
