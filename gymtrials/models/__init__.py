from gymtrials.models.gym import Gym
from gymtrials.models.user import User
from gymtrials.models.trial import TrialBooking, TrialHistoryEntry, SessionType, BookingStatus, TrialHistoryStatus
from gymtrials.models.member import Member, Trainer
from gymtrials.models.attendance import AttendanceRecord, PersonType, AttendanceStatus
from gymtrials.models.notification import Notification
from gymtrials.models.cash_validation import CashValidation, CashValidationStatus
