from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from auth import decode_download_token
from utils import resolve_private_path

router = APIRouter()


@router.get("/resumes/download")
def download_resume(token: str):
    key = decode_download_token(token)
    path = resolve_private_path(key)
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")
    return FileResponse(path, filename=path.name)
