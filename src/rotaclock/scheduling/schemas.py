from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..core.enums import AssignmentStatus


class AssignShift(BaseModel):
    employee_id: int
    date: str
    template_id: Optional[int] = None
    rota_id: Optional[int] = None
    notes: Optional[str] = None
    override_name: Optional[str] = None
    override_start_time: Optional[str] = None
    override_end_time: Optional[str] = None
    override_color: Optional[str] = None


class UpdateAssignment(BaseModel):
    id: int
    template_id: Optional[int] = None
    date: Optional[str] = None
    status: Optional[AssignmentStatus] = None
    notes: Optional[str] = None
    override_name: Optional[str] = None
    override_start_time: Optional[str] = None
    override_end_time: Optional[str] = None
    override_color: Optional[str] = None


class WeekQuery(BaseModel):
    employee_id: Optional[int] = None
    rota_id: Optional[int] = None
    published_only: bool = False
    show_drafts_only: bool = False


class DraftQuery(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rota_id: Optional[int] = None


class PublishRequest(BaseModel):
    """One of ``shift_ids``, ``start_date``/``end_date`` or ``publish_all``."""

    shift_ids: Optional[list[int]] = Field(default=None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    publish_all: bool = False
    week_of: Optional[date] = None
    rota_id: Optional[int] = None

    @model_validator(mode="after")
    def one_selection(self) -> "PublishRequest":
        has_range = self.start_date is not None or self.end_date is not None
        modes = sum([self.shift_ids is not None, has_range, self.publish_all])
        if modes != 1:
            raise ValueError("Provide exactly one of shift_ids, start_date/end_date or publish_all")
        if has_range and (self.start_date is None or self.end_date is None):
            raise ValueError("start_date and end_date must be provided together")
        if self.publish_all and self.week_of is None:
            raise ValueError("week_of is required with publish_all")
        return self
