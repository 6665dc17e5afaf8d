import pytest
from datetime import date

from gymtrials.core.exceptions import ConflictError, NotFoundError
from gymtrials.schemas.member import MemberCreate, MemberUpdate, TrainerCreate
from gymtrials.services.member import member_service


class TestMemberService:

    def test_duplicate_email_is_rejected(self, db, gym, member):
        member_in = MemberCreate(name="Luis P.", email="luis@test.com", phone="5559990000")

        with pytest.raises(ConflictError) as exc_info:
            member_service.create_member(db, gym.id, member_in)

        assert exc_info.value.code == "DuplicateMember"
        assert exc_info.value.details["member_ids"] == [member.id]
        assert exc_info.value.details["fields"] == ["email"]

    def test_force_skips_duplicate_check(self, db, gym, member):
        member_in = MemberCreate(name="Luis P.", phone="5550001111", force=True)

        created = member_service.create_member(db, gym.id, member_in)

        assert created.id != member.id
        assert created.phone == member.phone

    def test_same_email_in_other_gym_is_allowed(self, db, other_gym, member):
        created = member_service.create_member(
            db, other_gym.id, MemberCreate(name="Luis Pérez", email="luis@test.com")
        )

        assert created.gym_id == other_gym.id

    def test_update_checks_duplicates_excluding_itself(self, db, gym, member):
        other = member_service.create_member(db, gym.id, MemberCreate(name="Eva", email="eva@test.com"))

        updated = member_service.update_member(db, gym.id, member.id, MemberUpdate(email="luis@test.com", plan_name="Anual"))
        assert updated.plan_name == "Anual"

        with pytest.raises(ConflictError):
            member_service.update_member(db, gym.id, other.id, MemberUpdate(email="luis@test.com"))

    def test_member_of_other_gym_not_found(self, db, other_gym, member):
        with pytest.raises(NotFoundError):
            member_service.get_member(db, other_gym.id, member.id)

    def test_search(self, db, gym, member):
        member_service.create_member(db, gym.id, MemberCreate(name="Eva Gómez", email="eva@test.com"))

        found = member_service.list_members(db, gym.id, search="luis")

        assert [m.id for m in found] == [member.id]

    def test_trainers(self, db, gym):
        trainer = member_service.create_trainer(
            db, gym.id, TrainerCreate(first_name="Iván", specialty="Crossfit", join_date=date(2024, 3, 1))
        )

        assert member_service.get_trainer(db, gym.id, trainer.id).full_name == "Iván"
        assert len(member_service.list_trainers(db, gym.id)) == 1
