from fastapi import APIRouter

router = APIRouter()


@router.get("/")
def root():
    return {"message": "Strudel Hackathon API is running"}


@router.get("/health")
def health_check():
    return {"ok": True}
