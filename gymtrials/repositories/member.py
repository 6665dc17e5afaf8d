from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import or_

from gymtrials.repositories.base import BaseRepository
from gymtrials.models.member import Member, Trainer
from gymtrials.schemas.member import MemberCreate, MemberUpdate, TrainerCreate


class MemberRepository(BaseRepository[Member, MemberCreate, MemberUpdate]):
    def find_duplicates(
        self,
        db: Session,
        *,
        gym_id: int,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        exclude_id: Optional[int] = None
    ) -> List[Member]:
        """Miembros del gimnasio con el mismo email o teléfono."""
        conditions = []
        if email:
            conditions.append(Member.email == email)
        if phone:
            conditions.append(Member.phone == phone)
        if not conditions:
            return []

        query = db.query(Member).filter(Member.gym_id == gym_id, or_(*conditions))
        if exclude_id is not None:
            query = query.filter(Member.id != exclude_id)
        return query.all()

    def search(
        self, db: Session, *, gym_id: int, search: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> List[Member]:
        query = db.query(Member).filter(Member.gym_id == gym_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Member.name.ilike(pattern), Member.email.ilike(pattern)))
        return query.order_by(Member.name).offset(skip).limit(limit).all()


class TrainerRepository(BaseRepository[Trainer, TrainerCreate, TrainerCreate]):
    pass


member_repository = MemberRepository(Member)
trainer_repository = TrainerRepository(Trainer)
