import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models import Registration
from schemas import RegistrationCount, RegistrationCreate, RegistrationResponse, SuccessResponse
from security import require_api_key

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/registrations", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
def create_registration(payload: RegistrationCreate, db: Session = Depends(get_db)):
    try:
        db.add(Registration(name=payload.name, email=payload.email, vnumber=payload.vnumber))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Error creating registration")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")
    return SuccessResponse()


@router.get("/registrations", response_model=List[RegistrationResponse])
def list_registrations(_: bool = Depends(require_api_key), db: Session = Depends(get_db)):
    rows = (
        db.query(Registration)
        .order_by(Registration.created_at.desc(), Registration.id.desc())
        .all()
    )
    return [
        RegistrationResponse(
            id=row.id,
            name=row.name,
            email=row.email,
            vnumber=row.vnumber,
            createdAt=row.created_at,
        )
        for row in rows
    ]


@router.get("/registrations/count", response_model=RegistrationCount)
def count_registrations(db: Session = Depends(get_db)):
    count = db.query(func.count(func.distinct(Registration.email))).scalar() or 0
    return RegistrationCount(count=int(count))
