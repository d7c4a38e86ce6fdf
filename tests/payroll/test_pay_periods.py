from datetime import date

import pytest

from rotaclock.core.enums import PayFrequency
from rotaclock.payroll.periods import pay_period_bounds

ANCHOR = date(2024, 1, 1)


@pytest.mark.parametrize(
    "frequency, reference, expected",
    [
        (PayFrequency.WEEKLY, date(2024, 1, 10), (date(2024, 1, 8), date(2024, 1, 14))),
        (PayFrequency.BIWEEKLY, date(2024, 1, 10), (date(2024, 1, 1), date(2024, 1, 14))),
        (PayFrequency.BIWEEKLY, date(2024, 1, 15), (date(2024, 1, 15), date(2024, 1, 28))),
        (PayFrequency.BIWEEKLY, date(2023, 12, 31), (date(2023, 12, 18), date(2023, 12, 31))),
        (PayFrequency.SEMIMONTHLY, date(2024, 2, 15), (date(2024, 2, 1), date(2024, 2, 15))),
        (PayFrequency.SEMIMONTHLY, date(2024, 2, 16), (date(2024, 2, 16), date(2024, 2, 29))),
        (PayFrequency.MONTHLY, date(2023, 2, 10), (date(2023, 2, 1), date(2023, 2, 28))),
    ],
)
def test_pay_period_bounds(frequency, reference, expected):
    assert pay_period_bounds(frequency, reference, anchor=ANCHOR) == expected
