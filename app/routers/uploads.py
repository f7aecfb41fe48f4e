# app/routers/uploads.py

from fastapi import APIRouter, File, Request, UploadFile

from app.core.config import settings
from app.core.rate_limiter import limiter
from app.core.storage import save_upload

router = APIRouter(prefix="/upload", tags=["Uploads"])


@router.post("/photo")
@limiter.limit(settings.UPLOAD_RATE_LIMIT)
def upload_photo(
    request: Request,
    photo: UploadFile = File(...),
):
    return {"url": save_upload(photo)}
