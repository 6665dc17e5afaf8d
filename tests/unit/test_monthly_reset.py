import pytest
from datetime import date, datetime

from gymtrials.core.exceptions import ValidationError
from gymtrials.schemas.user import TrialUsage
from gymtrials.services.trial_limits import apply_monthly_reset, next_reset_date, parse_requested_date, same_cycle


def usage(used, reset):
    return TrialUsage(total_trials=3, used_trials=used, remaining_trials=3 - used, last_reset_date=reset)


class TestMonthlyReset:

    def test_same_month_keeps_usage(self):
        result = apply_monthly_reset(usage(2, datetime(2024, 6, 1)), datetime(2024, 6, 30, 23, 59))

        assert result.used_trials == 2
        assert result.remaining_trials == 1
        assert result.next_reset_date == date(2024, 7, 1)

    def test_new_month_restores_trials(self):
        now = datetime(2024, 7, 1, 0, 5)
        result = apply_monthly_reset(usage(3, datetime(2024, 6, 15)), now)

        assert result.used_trials == 0
        assert result.remaining_trials == 3
        assert result.last_reset_date == now

    def test_same_month_of_other_year_resets(self):
        assert same_cycle(datetime(2023, 6, 10), datetime(2024, 6, 10)) is False
        assert same_cycle(None, datetime(2024, 6, 10)) is False

    def test_december_rolls_over(self):
        assert next_reset_date(datetime(2024, 12, 31)) == date(2025, 1, 1)


class TestParseRequestedDate:

    @pytest.mark.parametrize("value", ["2024-06-10", "2024-06-10T09:00:00", date(2024, 6, 10), datetime(2024, 6, 10, 9)])
    def test_accepted_formats(self, value):
        assert parse_requested_date(value) == date(2024, 6, 10)

    @pytest.mark.parametrize("value", [
        "", "mañana", "2024-13-01", "2024-06-10garbage", "2024-06-10T99:99", "2024-06-10 not a date",
    ])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError):
            parse_requested_date(value)
