from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..core.enums import PayPeriodStatus


class PayPeriodCreate(BaseModel):
    start_date: date
    end_date: date


class PayPeriodStatusUpdate(BaseModel):
    id: int
    status: PayPeriodStatus


class PayPeriodQuery(BaseModel):
    status: Optional[PayPeriodStatus] = None


class AdjustmentCreate(BaseModel):
    pay_period_id: int
    employee_id: int
    amount: float = Field(gt=0)
    reason: str = Field(min_length=1)
    category: Optional[str] = None


class SummaryQuery(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    pay_period_id: Optional[int] = None
