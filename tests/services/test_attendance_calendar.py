from datetime import date, time
from types import SimpleNamespace

from gymtrials.models.attendance import AttendanceStatus
from gymtrials.schemas.attendance import DayClassification
from gymtrials.services.attendance_calendar import build_month_calendar, grid_start


def record(day, status=AttendanceStatus.PRESENT, check_in=None):
    return SimpleNamespace(date=day, status=status, check_in_time=check_in)


def by_date(calendar):
    return {cell.date: cell for cell in calendar.days}


class TestMonthCalendar:

    def test_grid_starts_on_sunday_with_42_cells(self):
        calendar = build_month_calendar(2024, 6, [], today=date(2024, 7, 1))

        assert grid_start(2024, 6) == date(2024, 5, 26)
        assert len(calendar.days) == 42
        assert calendar.days[0].date == date(2024, 5, 26)
        assert calendar.days[-1].date == date(2024, 7, 6)

    def test_membership_window_scenario(self):
        records = [
            record(date(2024, 6, 10), check_in=time(7, 30)),
            record(date(2024, 6, 11), AttendanceStatus.ABSENT),
            record(date(2024, 6, 16)),  # domingo
            record(date(2024, 6, 3)),  # antes de la membresía
        ]

        calendar = build_month_calendar(
            2024, 6, records, today=date(2024, 7, 1),
            join_date=date(2024, 6, 5), valid_until=date(2024, 6, 20),
        )
        cells = by_date(calendar)

        assert cells[date(2024, 5, 31)].status == DayClassification.OUTSIDE_MONTH
        assert cells[date(2024, 6, 3)].status == DayClassification.OUTSIDE_MEMBERSHIP
        assert cells[date(2024, 6, 4)].status == DayClassification.OUTSIDE_MEMBERSHIP
        assert cells[date(2024, 6, 5)].status == DayClassification.NOT_MARKED
        assert cells[date(2024, 6, 9)].status == DayClassification.WEEKEND
        assert cells[date(2024, 6, 10)].status == DayClassification.PRESENT
        assert cells[date(2024, 6, 10)].check_in_time == time(7, 30)
        assert cells[date(2024, 6, 11)].status == DayClassification.ABSENT
        assert cells[date(2024, 6, 12)].status == DayClassification.NOT_MARKED
        assert cells[date(2024, 6, 16)].status == DayClassification.WEEKEND
        assert cells[date(2024, 6, 20)].status == DayClassification.NOT_MARKED
        assert cells[date(2024, 6, 21)].status == DayClassification.OUTSIDE_MEMBERSHIP

        # Del 5 al 20 de junio hay 14 días laborables (sin los domingos 9 y 16)
        stats = calendar.stats
        assert stats.total_working_days == 14
        assert stats.present_count == 1
        assert stats.absent_count == 1
        assert stats.not_marked_count == 12
        assert stats.attendance_rate == 1 / 14
        assert stats.attendance_percentage == 7

    def test_future_days_and_today(self):
        records = [record(date(2024, 6, 12)), record(date(2024, 6, 13))]

        calendar = build_month_calendar(2024, 6, records, today=date(2024, 6, 12))
        cells = by_date(calendar)

        assert cells[date(2024, 6, 12)].status == DayClassification.PRESENT
        assert cells[date(2024, 6, 12)].is_today is True
        assert cells[date(2024, 6, 13)].status == DayClassification.FUTURE
        assert cells[date(2024, 6, 23)].status == DayClassification.WEEKEND
        # 1 al 12 de junio: 10 días laborables (sin los domingos 2 y 9)
        assert calendar.stats.total_working_days == 10
        assert calendar.stats.present_count == 1

    def test_no_working_days(self):
        calendar = build_month_calendar(
            2024, 6, [], today=date(2024, 7, 15), join_date=date(2024, 7, 1),
        )

        assert calendar.stats.total_working_days == 0
        assert calendar.stats.attendance_rate == 0.0
        assert calendar.stats.attendance_percentage == 0
        assert all(
            cell.status in (DayClassification.OUTSIDE_MEMBERSHIP, DayClassification.OUTSIDE_MONTH)
            for cell in calendar.days
        )

    def test_december_grid_crosses_year(self):
        calendar = build_month_calendar(2024, 12, [], today=date(2025, 1, 10))
        cells = by_date(calendar)

        assert calendar.days[0].date == date(2024, 12, 1)
        assert cells[date(2025, 1, 2)].status == DayClassification.OUTSIDE_MONTH
        assert cells[date(2024, 12, 31)].in_month is True
