from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
import logging

from ..application.services.image_service import ImageService
from ..dependencies import ADMIN, CurrentActor, get_current_actor, get_image_service
from ..schemas import ProfileImageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.post("/profile-image", response_model=ProfileImageResponse)
async def upload_profile_image(
    file: UploadFile = File(...),
    actor: CurrentActor = Depends(get_current_actor),
    service: ImageService = Depends(get_image_service),
):
    if actor.role == ADMIN:
        raise HTTPException(status_code=403, detail="Admins do not have a profile image")
    try:
        data = await file.read()
        url = await service.upload_profile_image(actor.role, actor.id, data, file.filename, file.content_type)
        return ProfileImageResponse(profile_image_url=url)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error uploading profile image for {actor.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to upload image")
