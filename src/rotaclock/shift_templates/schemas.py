from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    start_time: str
    end_time: str
    color: Optional[str] = None
    department: Optional[str] = None
    required_staff: Optional[int] = Field(default=None, ge=1)
    hourly_rate: Optional[float] = Field(default=None, ge=0)


class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    color: Optional[str] = None
    department: Optional[str] = None
    required_staff: Optional[int] = Field(default=None, ge=1)
    hourly_rate: Optional[float] = Field(default=None, ge=0)
