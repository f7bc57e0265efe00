import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from database import get_db
from models import Submission
from schemas import MAX_ID, SubmissionCreated, SubmissionResponse
from utils import save_image

router = APIRouter()
logger = logging.getLogger(__name__)

ID_PATTERN = re.compile(r"[0-9]{1,19}")


def _submission_response(row: Submission) -> SubmissionResponse:
    return SubmissionResponse(
        id=row.id,
        projectName=row.project_name,
        userName=row.user_name,
        projectUrl=row.project_url,
        imageUrl=row.image_url,
        createdAt=row.created_at,
    )


@router.post("/submissions", status_code=status.HTTP_201_CREATED, response_model=SubmissionCreated)
def create_submission(
    projectName: Optional[str] = Form(None),
    userName: Optional[str] = Form(None),
    projectUrl: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db)
):
    if not projectName or not userName or not projectUrl or image is None or not image.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")

    image_url = save_image(image)

    submission = Submission(
        project_name=projectName,
        user_name=userName,
        project_url=projectUrl,
        image_url=image_url,
    )
    try:
        db.add(submission)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Error creating submission")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")
    db.refresh(submission)

    return SubmissionCreated(id=submission.id, imageUrl=image_url)


@router.get("/submissions", response_model=List[SubmissionResponse])
def list_submissions(db: Session = Depends(get_db)):
    rows = (
        db.query(Submission)
        .order_by(Submission.created_at.desc(), Submission.id.desc())
        .all()
    )
    return [_submission_response(row) for row in rows]


@router.get("/submissions/{submission_id}", response_model=SubmissionResponse)
def get_submission(submission_id: str, db: Session = Depends(get_db)):
    if not ID_PATTERN.fullmatch(submission_id) or not 0 < int(submission_id) <= MAX_ID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid id")
    parsed_id = int(submission_id)

    row = db.query(Submission).filter(Submission.id == parsed_id).first()
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return _submission_response(row)
