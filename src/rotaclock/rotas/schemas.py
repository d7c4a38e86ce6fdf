from __future__ import annotations

from pydantic import BaseModel, Field


class RotaCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    week_start_date: str
