from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from gymtrials.core.exceptions import ConflictError, NotFoundError
from gymtrials.models.member import Member, Trainer
from gymtrials.repositories.member import member_repository, trainer_repository
from gymtrials.schemas.member import MemberCreate, MemberUpdate, TrainerCreate

logger = logging.getLogger(__name__)


class MemberService:
    """Alta y mantenimiento de miembros y entrenadores de un gimnasio."""

    def _check_duplicates(
        self,
        db: Session,
        gym_id: int,
        email: Optional[str],
        phone: Optional[str],
        exclude_id: Optional[int] = None
    ) -> None:
        duplicates = member_repository.find_duplicates(
            db, gym_id=gym_id, email=email, phone=phone, exclude_id=exclude_id
        )
        if not duplicates:
            return
        fields = set()
        for member in duplicates:
            if email and member.email == email:
                fields.add("email")
            if phone and member.phone == phone:
                fields.add("phone")
        raise ConflictError(
            "Ya existe un miembro con el mismo " + " y ".join(sorted(fields)),
            code="DuplicateMember",
            details={"member_ids": [m.id for m in duplicates], "fields": sorted(fields)},
        )

    def create_member(self, db: Session, gym_id: int, member_in: MemberCreate) -> Member:
        """
        Registra un miembro en el gimnasio.

        Raises:
            ConflictError: Si ya hay un miembro con el mismo email o teléfono y no se fuerza el alta
        """
        if not member_in.force:
            self._check_duplicates(db, gym_id, member_in.email, member_in.phone)
        data = member_in.model_dump(exclude={"force"})
        member = member_repository.create(db, obj_in=data, gym_id=gym_id)
        logger.info(f"Miembro {member.id} creado en gym {gym_id}")
        return member

    def list_members(
        self, db: Session, gym_id: int, search: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> List[Member]:
        return member_repository.search(db, gym_id=gym_id, search=search, skip=skip, limit=limit)

    def get_member(self, db: Session, gym_id: int, member_id: int) -> Member:
        member = member_repository.get(db, id=member_id, gym_id=gym_id)
        if not member:
            raise NotFoundError(f"Miembro {member_id} no encontrado")
        return member

    def update_member(self, db: Session, gym_id: int, member_id: int, member_in: MemberUpdate) -> Member:
        member = self.get_member(db, gym_id, member_id)
        data = member_in.model_dump(exclude_unset=True)
        if "email" in data or "phone" in data:
            self._check_duplicates(db, gym_id, data.get("email"), data.get("phone"), exclude_id=member.id)
        return member_repository.update(db, db_obj=member, obj_in=data, gym_id=gym_id)

    def delete_member(self, db: Session, gym_id: int, member_id: int) -> Member:
        member = member_repository.remove(db, id=member_id, gym_id=gym_id)
        logger.info(f"Miembro {member_id} eliminado del gym {gym_id}")
        return member

    # --- Entrenadores ---

    def create_trainer(self, db: Session, gym_id: int, trainer_in: TrainerCreate) -> Trainer:
        return trainer_repository.create(db, obj_in=trainer_in, gym_id=gym_id)

    def list_trainers(self, db: Session, gym_id: int, skip: int = 0, limit: int = 100) -> List[Trainer]:
        return trainer_repository.get_multi(db, gym_id=gym_id, skip=skip, limit=limit)

    def get_trainer(self, db: Session, gym_id: int, trainer_id: int) -> Trainer:
        trainer = trainer_repository.get(db, id=trainer_id, gym_id=gym_id)
        if not trainer:
            raise NotFoundError(f"Entrenador {trainer_id} no encontrado")
        return trainer


member_service = MemberService()
