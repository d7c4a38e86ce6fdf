from __future__ import annotations

import calendar
from datetime import date, timedelta

from ..core.enums import PayFrequency


def pay_period_bounds(frequency: PayFrequency, reference: date, *, anchor: date) -> tuple[date, date]:
    """Inclusive start/end of the pay period containing ``reference``.

    Weekly and biweekly periods repeat from ``anchor``; semimonthly splits at
    the 15th; monthly follows calendar months.
    """
    if frequency in (PayFrequency.WEEKLY, PayFrequency.BIWEEKLY):
        length = 7 if frequency == PayFrequency.WEEKLY else 14
        offset = (reference - anchor).days // length
        start = anchor + timedelta(days=offset * length)
        return start, start + timedelta(days=length - 1)

    last_day = calendar.monthrange(reference.year, reference.month)[1]
    if frequency == PayFrequency.SEMIMONTHLY:
        if reference.day <= 15:
            return reference.replace(day=1), reference.replace(day=15)
        return reference.replace(day=16), reference.replace(day=last_day)

    return reference.replace(day=1), reference.replace(day=last_day)
