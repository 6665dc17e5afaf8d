from fastapi import APIRouter

# Import routers from modules
from gymtrials.api.v1.endpoints import (
    attendance,
    cash_validations,
    gyms,
    members,
    notifications,
    trainers,
    trial_bookings,
    users,
)

api_router = APIRouter()

# Trial bookings module
api_router.include_router(trial_bookings.router, prefix="/trial-bookings", tags=["trial-bookings"])

# Attendance module
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])

# Members and trainers
api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(trainers.router, prefix="/trainers", tags=["trainers"])

# Gyms and users
api_router.include_router(gyms.router, prefix="/gyms", tags=["gyms"])
api_router.include_router(users.router, prefix="/users", tags=["users"])

# Notifications module
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])

# Cash payments
api_router.include_router(cash_validations.router, prefix="/cash-validations", tags=["cash-validations"])
