import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth import create_access_token, get_current_account, get_password_hash, verify_password
from bootstrap import DEFAULT_EVENT_ID
from database import get_db, is_unique_violation
from models import EventRegistration, User
from schemas import AccountCreated, AccountResponse, LoginResponse, UserLogin
from utils import LOGIN_SIGNED_URL_TTL_SECONDS, SIGNED_URL_TTL_SECONDS, generate_resume_url, store_resume

router = APIRouter()
logger = logging.getLogger(__name__)


def _signed_resume_url(user: User, expires_in: int) -> Optional[str]:
    # A failed signature only blanks this account's link
    try:
        return generate_resume_url(user.resume_path, expires_in=expires_in)
    except HTTPException:
        logger.warning("Could not sign resume URL for user %s", user.id)
        return None


def account_response(user: User, expires_in: int = SIGNED_URL_TTL_SECONDS) -> AccountResponse:
    response = AccountResponse.model_validate(user)
    response.resume_url = _signed_resume_url(user, expires_in)
    return response


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


@router.post("/account-reg", status_code=status.HTTP_201_CREATED, response_model=AccountCreated)
def register_account(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    vnumber: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db)
):
    if not name or not email or not vnumber or not password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing name, email, vnumber, or password")

    # Stored before the transaction; not removed if the inserts fail
    resume_path = store_resume(resume) if _has_file(resume) else None

    try:
        user = User(
            name=name,
            email=email,
            vnumber=vnumber,
            password_hash=get_password_hash(password),
            resume_path=resume_path,
            bio=bio,
        )
        db.add(user)
        db.flush()
        db.add(EventRegistration(user_id=user.id, event_id=DEFAULT_EVENT_ID, status="registered"))
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email or V-number already in use")
        logger.exception("Error creating account")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")
    except Exception:
        db.rollback()
        logger.exception("Error creating account")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")

    return AccountCreated(userId=user.id, resume_path=resume_path)


@router.post("/login", response_model=LoginResponse)
def login(login_data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == login_data.email).first()
    if not user or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    token = create_access_token(user.id, user.email)
    return LoginResponse(
        token=token,
        user=account_response(user, expires_in=LOGIN_SIGNED_URL_TTL_SECONDS),
    )


@router.get("/profile", response_model=AccountResponse)
def get_profile(user: User = Depends(get_current_account)):
    return account_response(user)


@router.put("/profile", response_model=AccountResponse)
def update_profile(
    name: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    if name is not None:
        user.name = name
    if bio is not None:
        user.bio = bio
    if _has_file(resume):
        user.resume_path = store_resume(resume)

    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Error updating profile for user %s", user.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")
    db.refresh(user)
    return account_response(user)
