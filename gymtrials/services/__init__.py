"""
Services module for GymTrialsAPI

Los servicios implementan la lógica de negocio: interactúan con los
repositorios, Redis y OneSignal.
"""

# servicios disponibles
from gymtrials.services.trial_limits import trial_limit_service
from gymtrials.services.trial_booking import trial_booking_service
from gymtrials.services.attendance import attendance_service
from gymtrials.services.member import member_service
from gymtrials.services.gym import gym_service
from gymtrials.services.user import user_service
from gymtrials.services.cash_validation import cash_validation_service
from gymtrials.services.notification_service import notification_dispatcher
