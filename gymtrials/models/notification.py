from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey, Index
from datetime import datetime

from gymtrials.db.base_class import Base


class Notification(Base):
    """
    Notificación persistida. user_id None significa la bandeja del
    administrador del gimnasio.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False)
    user_id = Column(Integer, nullable=True, index=True)
    type = Column(String(50), nullable=False)  # 'trial_booking', 'booking_status', 'cash_validation'
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(Integer, nullable=True)
    priority = Column(String(10), nullable=False, default="medium")  # 'low', 'medium', 'high'
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('ix_notifications_gym_read', 'gym_id', 'is_read'),
    )
