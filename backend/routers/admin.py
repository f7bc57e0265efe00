from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models import User
from routers.accounts import account_response
from schemas import AccountResponse
from security import require_api_key

router = APIRouter()


@router.get("/admin/registrations", response_model=List[AccountResponse])
def list_accounts(_: bool = Depends(require_api_key), db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return [account_response(user) for user in users]
