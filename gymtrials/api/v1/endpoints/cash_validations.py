from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from typing import Any, Dict

from gymtrials.core.tenant import get_current_gym
from gymtrials.db.session import get_db
from gymtrials.middleware.rate_limit import limiter, RATE_LIMITS
from gymtrials.models.gym import Gym
from gymtrials.schemas.cash_validation import CashValidation, CashValidationCreate
from gymtrials.services.cash_validation import cash_validation_service

router = APIRouter()


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["cash_validation"])
async def create_cash_validation(
    request: Request,
    validation_in: CashValidationCreate,
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    """
    Genera un código de validación para un pago en efectivo.
    El código caduca a los CASH_VALIDATION_TTL_SECONDS segundos.
    """
    validation = cash_validation_service.create_validation(db, current_gym.id, validation_in)
    return {
        "success": True,
        "message": "Código de validación generado",
        "validation_code": validation.validation_code,
        "expires_at": validation.expires_at,
    }


@router.get("/pending", response_model=Dict[str, Any])
async def list_pending_validations(
    db: Session = Depends(get_db),
    current_gym: Gym = Depends(get_current_gym)
) -> Any:
    pending = cash_validation_service.list_pending(db, current_gym.id)
    return {"success": True, "validations": pending}


@router.get("/{code}", response_model=Dict[str, Any])
async def check_validation_status(
    code: str,
    db: Session = Depends(get_db)
) -> Any:
    validation = cash_validation_service.check_status(db, code)
    return {"success": True, "validation": validation}


@router.put("/{code}/confirm", response_model=Dict[str, Any])
async def confirm_validation(
    code: str,
    db: Session = Depends(get_db)
) -> Any:
    validation = cash_validation_service.confirm(db, code)
    return {
        "success": True,
        "message": "Pago confirmado, miembro registrado",
        "validation": CashValidation.model_validate(validation),
    }


@router.put("/{code}/reject", response_model=Dict[str, Any])
async def reject_validation(
    code: str,
    db: Session = Depends(get_db)
) -> Any:
    validation = cash_validation_service.reject(db, code)
    return {
        "success": True,
        "message": "Pago rechazado",
        "validation": CashValidation.model_validate(validation),
    }
