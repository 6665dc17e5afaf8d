# Inicializador del paquete repositories
from gymtrials.repositories.base import BaseRepository
from gymtrials.repositories.user import user_repository
from gymtrials.repositories.gym import gym_repository
from gymtrials.repositories.trial import trial_booking_repository, trial_history_repository
from gymtrials.repositories.member import member_repository, trainer_repository
from gymtrials.repositories.attendance import attendance_repository
from gymtrials.repositories.notification import notification_repository
from gymtrials.repositories.cash_validation import cash_validation_repository
