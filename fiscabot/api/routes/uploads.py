"""Read-only access to uploaded photos."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from fiscabot.api.deps import PhotoStorage, get_photo_storage
from fiscabot.core.config import settings

router = APIRouter(prefix=settings.UPLOAD_URL_PREFIX, tags=["uploads"])


@router.get("/{name}", response_class=FileResponse)
async def get_photo(name: str, photos: PhotoStorage = Depends(get_photo_storage)):
    path = photos.resolve(name)
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Foto não encontrada")
    return FileResponse(path)
