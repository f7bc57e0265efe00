import hmac
import logging
import os
from typing import Optional

from fastapi import Header, HTTPException, status

logger = logging.getLogger(__name__)


def _admin_api_key() -> Optional[str]:
    return os.environ.get("ADMIN_API_KEY") or None


def require_api_key(x_api_key: Optional[str] = Header(None, alias="x-api-key")) -> bool:
    expected = _admin_api_key()
    if not expected:
        logger.error("ADMIN_API_KEY is not configured; refusing access-key protected request")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server misconfigured")
    if not x_api_key or not hmac.compare_digest(x_api_key.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return True
