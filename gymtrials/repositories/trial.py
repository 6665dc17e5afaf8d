from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session

from gymtrials.repositories.base import BaseRepository
from gymtrials.models.trial import TrialBooking, TrialHistoryEntry, TrialHistoryStatus
from gymtrials.schemas.trial import TrialBookingCreate, TrialBookingStatusUpdate


class TrialBookingRepository(BaseRepository[TrialBooking, TrialBookingCreate, TrialBookingStatusUpdate]):
    def get_page(
        self,
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        gym_id: Optional[int] = None,
        session_type: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> Tuple[List[TrialBooking], int]:
        """
        Obtener una página de reservas, más recientes primero.

        Returns:
            Tupla (reservas de la página, total de reservas que cumplen el filtro)
        """
        query = self._filtered_query(
            db,
            gym_id=gym_id,
            filters={"status": status, "session_type": session_type, "user_id": user_id},
        )
        total = query.count()
        bookings = (
            query.order_by(TrialBooking.created_at.desc(), TrialBooking.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return bookings, total


class TrialHistoryRepository(BaseRepository[TrialHistoryEntry, TrialBookingCreate, TrialBookingCreate]):
    def get_by_booking(self, db: Session, *, booking_id: int) -> Optional[TrialHistoryEntry]:
        return db.query(TrialHistoryEntry).filter(TrialHistoryEntry.booking_id == booking_id).first()

    def get_for_user(
        self,
        db: Session,
        *,
        user_id: int,
        gym_id: Optional[int] = None,
        statuses: Optional[Sequence[TrialHistoryStatus]] = None
    ) -> List[TrialHistoryEntry]:
        query = db.query(TrialHistoryEntry).filter(TrialHistoryEntry.user_id == user_id)
        if gym_id is not None:
            query = query.filter(TrialHistoryEntry.gym_id == gym_id)
        if statuses:
            query = query.filter(TrialHistoryEntry.status.in_(list(statuses)))
        return query.order_by(TrialHistoryEntry.trial_date.desc()).all()


trial_booking_repository = TrialBookingRepository(TrialBooking)
trial_history_repository = TrialHistoryRepository(TrialHistoryEntry)
