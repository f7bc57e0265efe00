import logging
import os
import random
import re
import uuid
from datetime import timedelta
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode
from fastapi import HTTPException, status, UploadFile
import boto3
from botocore.config import Config

from auth import create_download_token
from database import DATA_DIR
from time_utils import epoch_millis

logger = logging.getLogger(__name__)

UPLOAD_DIR = DATA_DIR / "uploads"
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
UPLOAD_URL_PREFIX = "/uploads"

# Resumes stored without a bucket; served only through signed download links
PRIVATE_DIR = DATA_DIR / "private"
PRIVATE_DIR.mkdir(parents=True, exist_ok=True)
RESUME_DOWNLOAD_PATH = "/api/resumes/download"

MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", 20 * 1024 * 1024))
RESUME_KEY_PREFIX = "resumes"

# Presigned GET lifetimes
SIGNED_URL_TTL_SECONDS = 15 * 60
LOGIN_SIGNED_URL_TTL_SECONDS = 24 * 60 * 60

AWS_REGION = os.environ.get("AWS_REGION")
S3_BUCKET_NAME = os.environ.get("S3_BUCKET_NAME")
S3_ACCESS_KEY = os.environ.get("S3_ACCESS_KEY") or os.environ.get("AWS_ACCESS_KEY_ID")
S3_SECRET_KEY = os.environ.get("S3_SECRET_KEY") or os.environ.get("AWS_SECRET_ACCESS_KEY")
STORAGE_CREDENTIALS_FILE = os.environ.get("STORAGE_CREDENTIALS_FILE")

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _build_s3_client():
    if not (AWS_REGION and S3_BUCKET_NAME):
        return None
    if STORAGE_CREDENTIALS_FILE:
        # boto3 resolves the shared credentials file through the standard provider chain
        os.environ.setdefault("AWS_SHARED_CREDENTIALS_FILE", STORAGE_CREDENTIALS_FILE)
    s3_config = Config(signature_version="s3v4", s3={"addressing_style": "virtual"})
    kwargs = {
        "region_name": AWS_REGION,
        "endpoint_url": f"https://s3.{AWS_REGION}.amazonaws.com",
        "config": s3_config,
    }
    if S3_ACCESS_KEY and S3_SECRET_KEY:
        kwargs["aws_access_key_id"] = S3_ACCESS_KEY
        kwargs["aws_secret_access_key"] = S3_SECRET_KEY
    return boto3.client("s3", **kwargs)


S3_CLIENT = _build_s3_client()


def bucket_enabled() -> bool:
    return S3_CLIENT is not None and bool(S3_BUCKET_NAME)


def storage_backend_name() -> str:
    return f"s3://{S3_BUCKET_NAME}" if bucket_enabled() else f"disk:{PRIVATE_DIR}"


def sanitize_object_name(filename: str) -> str:
    name = Path(filename or "").name
    cleaned = _UNSAFE_NAME_CHARS.sub("_", name)
    return cleaned or "file"


def build_disk_filename(original_name: Optional[str]) -> str:
    extension = Path(original_name or "").suffix.lower()
    unique = f"{epoch_millis()}-{random.randint(0, 10 ** 9)}"
    return f"{unique}{extension}"


def build_resume_key(original_name: Optional[str]) -> str:
    unique = f"{epoch_millis()}-{uuid.uuid4().hex[:12]}"
    return f"{RESUME_KEY_PREFIX}/{unique}-{sanitize_object_name(original_name or '')}"


def read_upload(file: UploadFile) -> bytes:
    contents = file.file.read()
    if len(contents) > MAX_UPLOAD_BYTES:
        limit_mb = MAX_UPLOAD_BYTES // (1024 * 1024)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"File size exceeds {limit_mb}MB limit")
    return contents


def _write_to_disk(base_dir: Path, relative_path: str, data: bytes) -> Path:
    target = base_dir / relative_path
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(target, "wb") as buffer:
            buffer.write(data)
    except OSError as exc:
        logger.exception("Writing upload to %s failed", target)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Upload failed") from exc
    return target


def save_image(file: UploadFile) -> str:
    """Store a submission image on local disk and return its public ``/uploads/...`` path."""
    data = read_upload(file)
    filename = build_disk_filename(file.filename)
    _write_to_disk(UPLOAD_DIR, filename, data)
    return f"{UPLOAD_URL_PREFIX}/{filename}"


def _upload_bytes_to_s3(data: bytes, key: str, content_type: Optional[str]) -> None:
    try:
        S3_CLIENT.put_object(
            Bucket=S3_BUCKET_NAME,
            Key=key,
            Body=data,
            ContentType=content_type or "application/octet-stream"
        )
    except Exception as exc:
        logger.exception("S3 upload of %s failed", key)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Upload failed") from exc


def store_resume(file: UploadFile) -> str:
    """Store a resume and return its storage key.

    The key is the same for both backends and neither is publicly readable:
    bucket objects are private, and the disk fallback writes under
    ``PRIVATE_DIR``, which has no static mount.
    """
    data = read_upload(file)
    key = build_resume_key(file.filename)
    if bucket_enabled():
        _upload_bytes_to_s3(data, key, file.content_type)
    else:
        _write_to_disk(PRIVATE_DIR, key, data)
    return key


def resolve_private_path(key: str) -> Optional[Path]:
    root = PRIVATE_DIR.resolve()
    target = (PRIVATE_DIR / key).resolve()
    if root not in target.parents or not target.is_file():
        return None
    return target


def generate_resume_url(key: Optional[str], expires_in: int = SIGNED_URL_TTL_SECONDS) -> Optional[str]:
    if not key:
        return None
    if not bucket_enabled():
        token = create_download_token(key, timedelta(seconds=expires_in))
        return f"{RESUME_DOWNLOAD_PATH}?{urlencode({'token': token})}"
    try:
        return S3_CLIENT.generate_presigned_url(
            "get_object",
            Params={"Bucket": S3_BUCKET_NAME, "Key": key},
            ExpiresIn=expires_in,
        )
    except Exception as exc:
        logger.exception("Signing resume URL for %s failed", key)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create download URL") from exc
