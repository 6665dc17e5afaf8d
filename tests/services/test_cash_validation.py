"""
Tests del flujo de validación de pagos en efectivo.
"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from unittest.mock import patch

from gymtrials.core.exceptions import NotFoundError, ValidationError
from gymtrials.models.cash_validation import CashValidation, CashValidationStatus
from gymtrials.models.member import Member
from gymtrials.models.notification import Notification
from gymtrials.schemas.cash_validation import CashValidationCreate
from gymtrials.services.cash_validation import CODE_ALPHABET, add_months, cash_validation_service

NOW = datetime(2024, 6, 10, 12, 0)


def create(db, gym, now=NOW, **kwargs):
    data = CashValidationCreate(
        member_name="Carlos Díaz",
        email="carlos@test.com",
        plan_name="Trimestral",
        duration_months=kwargs.pop("duration_months", 3),
        amount=Decimal("1500.00"),
        **kwargs,
    )
    return cash_validation_service.create_validation(db, gym.id, data, now=now)


class TestCreateValidation:

    def test_creates_pending_code_and_notifies_admin(self, db, gym):
        validation = create(db, gym)

        assert validation.status == CashValidationStatus.PENDING
        assert len(validation.validation_code) == 6
        assert all(c in CODE_ALPHABET for c in validation.validation_code)
        assert validation.expires_at == NOW + timedelta(seconds=120)

        notification = db.query(Notification).one()
        assert notification.type == "cash_validation"
        assert notification.priority == "high"
        assert validation.validation_code in notification.message

    def test_retries_repeated_code(self, db, gym):
        first = create(db, gym)

        with patch(
            "gymtrials.services.cash_validation.generate_code",
            side_effect=[first.validation_code, "ZZ9999"],
        ):
            second = create(db, gym)

        assert second.validation_code == "ZZ9999"
        assert db.query(CashValidation).count() == 2

    def test_unknown_gym(self, db):
        data = CashValidationCreate(member_name="X", plan_name="Mensual", amount=Decimal("10"))
        with pytest.raises(NotFoundError):
            cash_validation_service.create_validation(db, 999, data, now=NOW)


class TestResolveValidation:

    def test_status_reports_time_left(self, db, gym):
        validation = create(db, gym)

        status = cash_validation_service.check_status(
            db, validation.validation_code.lower(), now=NOW + timedelta(seconds=45)
        )

        assert status.status == CashValidationStatus.PENDING
        assert status.time_left == 75

    def test_status_expires_lazily(self, db, gym):
        validation = create(db, gym)

        status = cash_validation_service.check_status(
            db, validation.validation_code, now=NOW + timedelta(seconds=121)
        )

        assert status.status == CashValidationStatus.EXPIRED
        assert status.time_left == 0

    def test_confirm_creates_member(self, db, gym):
        validation = create(db, gym)

        with patch("gymtrials.services.cash_validation.get_gym_today", return_value=date(2024, 11, 30)):
            confirmed = cash_validation_service.confirm(db, validation.validation_code, now=NOW + timedelta(seconds=30))

        member = db.query(Member).one()
        assert confirmed.status == CashValidationStatus.CONFIRMED
        assert confirmed.member_id == member.id
        assert member.join_date == date(2024, 11, 30)
        assert member.membership_valid_until == date(2025, 2, 28)
        assert member.plan_name == "Trimestral"

    def test_confirm_expired_code(self, db, gym):
        validation = create(db, gym)

        with pytest.raises(ValidationError) as exc_info:
            cash_validation_service.confirm(db, validation.validation_code, now=NOW + timedelta(minutes=5))

        assert exc_info.value.code == "ValidationNotPending"
        assert db.query(Member).count() == 0

    def test_reject_then_confirm(self, db, gym):
        validation = create(db, gym)

        rejected = cash_validation_service.reject(db, validation.validation_code, now=NOW)
        assert rejected.status == CashValidationStatus.REJECTED

        with pytest.raises(ValidationError):
            cash_validation_service.confirm(db, validation.validation_code, now=NOW)

    def test_unknown_code(self, db):
        with pytest.raises(NotFoundError):
            cash_validation_service.check_status(db, "NOPE00", now=NOW)


def test_sweep_expires_only_stale_validations(db, gym):
    stale = create(db, gym, now=NOW - timedelta(minutes=10))
    fresh = create(db, gym, now=NOW)

    expired = cash_validation_service.expire_stale_validations(db, now=NOW + timedelta(seconds=10))
    db.expire_all()

    assert expired == 1
    assert db.get(CashValidation, stale.id).status == CashValidationStatus.EXPIRED
    assert db.get(CashValidation, fresh.id).status == CashValidationStatus.PENDING
    assert [v.id for v in cash_validation_service.list_pending(db, gym.id, now=NOW)] == [fresh.id]


@pytest.mark.parametrize("start,months,expected", [
    (date(2024, 1, 31), 1, date(2024, 2, 29)),
    (date(2024, 11, 15), 2, date(2025, 1, 15)),
    (date(2024, 6, 5), 12, date(2025, 6, 5)),
])
def test_add_months(start, months, expected):
    assert add_months(start, months) == expected
