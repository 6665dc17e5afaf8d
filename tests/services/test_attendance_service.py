"""
Tests para AttendanceService: marcado con upsert, informes y caché de
estadísticas mensuales.
"""

import json
import pytest
from datetime import date, time
from unittest.mock import AsyncMock, patch

from gymtrials.core.exceptions import NotFoundError, ValidationError
from gymtrials.models.attendance import AttendanceRecord, AttendanceStatus, PersonType
from gymtrials.schemas.attendance import AttendanceMark, DayClassification
from gymtrials.services.attendance import attendance_service


def mark(person, person_type=PersonType.MEMBER, day=date(2024, 6, 10), status=AttendanceStatus.PRESENT, **kwargs):
    return AttendanceMark(person_id=person.id, person_type=person_type, date=day, status=status, **kwargs)


class TestMarkAttendance:

    def test_second_mark_overwrites(self, db, gym, member):
        attendance_service.mark_attendance(db, gym.id, mark(member, check_in_time=time(8, 0)))
        record = attendance_service.mark_attendance(db, gym.id, mark(member, status=AttendanceStatus.ABSENT))

        assert record.status == AttendanceStatus.ABSENT
        assert record.check_in_time is None
        assert db.query(AttendanceRecord).count() == 1

    def test_unknown_person(self, db, gym):
        payload = AttendanceMark(
            person_id=99, person_type=PersonType.TRAINER, date=date(2024, 6, 10), status=AttendanceStatus.PRESENT
        )
        with pytest.raises(NotFoundError):
            attendance_service.mark_attendance(db, gym.id, payload)

    def test_person_from_other_gym(self, db, gym, other_gym, member):
        with pytest.raises(NotFoundError):
            attendance_service.mark_attendance(db, other_gym.id, mark(member))

    def test_bulk_mark(self, db, gym, member, trainer):
        count = attendance_service.bulk_mark_attendance(db, gym.id, [
            mark(member),
            mark(trainer, person_type=PersonType.TRAINER, status=AttendanceStatus.ABSENT),
            mark(member, status=AttendanceStatus.ABSENT),
        ])

        attendance = attendance_service.get_attendance_for_date(db, gym.id, date(2024, 6, 10))

        assert count == 3
        assert db.query(AttendanceRecord).count() == 2
        assert attendance[f"member_{member.id}"].status == AttendanceStatus.ABSENT
        assert attendance[f"trainer_{trainer.id}"].status == AttendanceStatus.ABSENT


class TestReports:

    def test_summary(self, db, gym, member, trainer):
        attendance_service.mark_attendance(db, gym.id, mark(member, day=date(2024, 6, 10)))
        attendance_service.mark_attendance(db, gym.id, mark(member, day=date(2024, 6, 11), status=AttendanceStatus.ABSENT))
        attendance_service.mark_attendance(db, gym.id, mark(trainer, person_type=PersonType.TRAINER, day=date(2024, 6, 10)))

        summary = attendance_service.get_attendance_summary(db, gym.id, date(2024, 6, 10), date(2024, 6, 16))

        assert summary.total_days == 7
        assert summary.member_attendance[str(member.id)].name == "Luis Pérez"
        assert len(summary.member_attendance[str(member.id)].attendance) == 2
        assert summary.trainer_attendance[str(trainer.id)].name == "Marta Ruiz"
        assert summary.daily_stats["2024-06-10"].members.present == 1
        assert summary.daily_stats["2024-06-10"].trainers.total == 1
        assert summary.daily_stats["2024-06-11"].members.absent == 1

    def test_summary_rejects_inverted_range(self, db, gym):
        with pytest.raises(ValidationError):
            attendance_service.get_attendance_summary(db, gym.id, date(2024, 6, 10), date(2024, 6, 1))

    def test_person_calendar_uses_membership_window(self, db, gym, member):
        attendance_service.mark_attendance(db, gym.id, mark(member, day=date(2024, 6, 10)))

        calendar = attendance_service.get_person_calendar(
            db, gym.id, PersonType.MEMBER, member.id, 2024, 6, today=date(2024, 7, 1)
        )

        cells = {cell.date: cell for cell in calendar.days}
        assert calendar.membership_start == date(2024, 6, 5)
        assert calendar.membership_end == date(2024, 6, 20)
        assert cells[date(2024, 6, 4)].status == DayClassification.OUTSIDE_MEMBERSHIP
        assert cells[date(2024, 6, 10)].status == DayClassification.PRESENT
        assert calendar.stats.total_working_days == 14

    def test_trainer_calendar_has_open_end(self, db, gym, trainer):
        calendar = attendance_service.get_person_calendar(
            db, gym.id, PersonType.TRAINER, trainer.id, 2024, 6, today=date(2024, 7, 1)
        )

        assert calendar.membership_end is None
        assert calendar.stats.not_marked_count == 25

    def test_cleanup_deletes_only_older_records(self, db, gym, member):
        attendance_service.mark_attendance(db, gym.id, mark(member, day=date(2024, 5, 31)))
        attendance_service.mark_attendance(db, gym.id, mark(member, day=date(2024, 6, 10)))

        deleted = attendance_service.cleanup_attendance(db, gym.id, date(2024, 6, 1))

        assert deleted == 1
        assert db.query(AttendanceRecord).one().date == date(2024, 6, 10)


class TestMonthlyStats:

    @pytest.mark.asyncio
    async def test_without_redis(self, db, gym, member, trainer):
        attendance_service.mark_attendance(db, gym.id, mark(member))
        attendance_service.mark_attendance(db, gym.id, mark(trainer, person_type=PersonType.TRAINER, status=AttendanceStatus.ABSENT))

        stats = await attendance_service.get_monthly_stats(db, gym.id, 6, 2024, redis_client=None)

        assert stats.total_records == 2
        assert stats.member_stats.present == 1
        assert stats.trainer_stats.absent == 1
        assert stats.daily_trends["2024-06-10"].members.total == 1

    @pytest.mark.asyncio
    async def test_cache_hit_skips_database(self, db, gym):
        cached = {
            "month": 6, "year": 2024, "total_records": 5,
            "member_stats": {"present": 4, "absent": 1, "total": 5},
            "trainer_stats": {"present": 0, "absent": 0, "total": 0},
            "daily_trends": {},
        }
        mock_redis = AsyncMock()
        mock_redis.get.return_value = json.dumps(cached)

        with patch.object(attendance_service, "_compute_monthly_stats") as compute:
            stats = await attendance_service.get_monthly_stats(db, gym.id, 6, 2024, redis_client=mock_redis)

        compute.assert_not_called()
        assert stats.total_records == 5
        mock_redis.get.assert_awaited_once_with(f"attendance_stats:{gym.id}:2024:6")

    @pytest.mark.asyncio
    async def test_cache_miss_stores_result(self, db, gym):
        mock_redis = AsyncMock()
        mock_redis.get.return_value = None

        stats = await attendance_service.get_monthly_stats(db, gym.id, 6, 2024, redis_client=mock_redis)

        assert stats.total_records == 0
        mock_redis.set.assert_awaited_once()
        assert mock_redis.set.call_args.kwargs["ex"] == 600

    @pytest.mark.asyncio
    async def test_invalid_month(self, db, gym):
        with pytest.raises(ValidationError):
            await attendance_service.get_monthly_stats(db, gym.id, 13, 2024)
