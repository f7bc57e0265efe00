import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db, is_unique_violation
from models import Event, EventRegistration, User
from schemas import EventRegistrationCreate, EventRegistrationCreated, EventResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/events", response_model=List[EventResponse])
def list_events(db: Session = Depends(get_db)):
    events = (
        db.query(Event)
        .filter(Event.is_active.is_(True))
        .order_by(Event.event_date.asc(), Event.id.asc())
        .all()
    )
    return [EventResponse.model_validate(event) for event in events]


@router.post("/events/register", status_code=status.HTTP_201_CREATED, response_model=EventRegistrationCreated)
def register_for_event(payload: EventRegistrationCreate, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == payload.userId).first()
    event = db.query(Event).filter(Event.id == payload.eventId).first()
    if not user or not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User or event not found")

    registration = EventRegistration(user_id=user.id, event_id=event.id, status="registered")
    db.add(registration)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already registered for this event")
        logger.exception("Error registering user %s for event %s", payload.userId, payload.eventId)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")
    except Exception:
        db.rollback()
        logger.exception("Error registering user %s for event %s", payload.userId, payload.eventId)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")

    db.refresh(registration)
    return EventRegistrationCreated(id=registration.id, status=registration.status)
