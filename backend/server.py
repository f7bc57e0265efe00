from fastapi import FastAPI, APIRouter, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware
import os
import logging
import uvicorn

from bootstrap import run_bootstrap_migrations
from routers import accounts, admin, events, public, registrations, resumes, submissions
from utils import UPLOAD_DIR, storage_backend_name

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,https://strudel.jimmer.dev"

app = FastAPI(title="Strudel Hackathon API", version="1.0.0")
api_router = APIRouter(prefix="/api")

# Mount static files for uploads
app.mount("/uploads", StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")


# ==================== STARTUP ====================
@app.on_event("startup")
async def startup_event():
    run_bootstrap_migrations()
    logger.info("Storage backend: %s", storage_backend_name())


# ==================== ERRORS ====================
def _describe_validation_error(exc: RequestValidationError) -> str:
    missing = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        if loc:
            missing.append(".".join(loc))
    if missing:
        return f"Missing or invalid fields: {', '.join(missing)}"
    return "Invalid request body"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _describe_validation_error(exc)},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"},
    )


# ==================== ROUTERS ====================
api_router.include_router(public.router)
api_router.include_router(submissions.router)
api_router.include_router(registrations.router)
api_router.include_router(accounts.router)
api_router.include_router(admin.router)
api_router.include_router(events.router)
api_router.include_router(resumes.router)

app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=os.environ.get('CORS_ORIGINS', DEFAULT_CORS_ORIGINS).split(','),
    allow_methods=["*"],
    allow_headers=["*"],
)


if __name__ == "__main__":
    uvicorn.run(
        "server:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 3002)),
    )
