# ecommerce/routers/cloudinary.py
from fastapi import APIRouter, Depends

from ..deps import require_admin
from ..schemas import ApiResponse, UploadConfigOut
from ..services import cloudinary_service

router = APIRouter(prefix="/api/Cloudinary", tags=["cloudinary"])


@router.get("/GetUploadConfig", response_model=ApiResponse[UploadConfigOut], dependencies=[Depends(require_admin)])
async def get_upload_config():
    config = cloudinary_service.get_upload_config()
    return ApiResponse[UploadConfigOut](message="Cloudinary config retrieved successfully", data=config)
