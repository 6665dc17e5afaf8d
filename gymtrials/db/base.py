# Importar todos los modelos para que Alembic y create_tables los detecten
from gymtrials.db.base_class import Base  # noqa
from gymtrials.models.gym import Gym  # noqa
from gymtrials.models.user import User  # noqa
from gymtrials.models.trial import TrialBooking, TrialHistoryEntry  # noqa
from gymtrials.models.member import Member, Trainer  # noqa
from gymtrials.models.attendance import AttendanceRecord  # noqa
from gymtrials.models.notification import Notification  # noqa
from gymtrials.models.cash_validation import CashValidation  # noqa
