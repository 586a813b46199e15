# ecommerce/services/cloudinary_service.py
from ..config import Config
from ..errors import BadRequestError
from ..schemas import UploadConfigOut


def get_upload_config() -> UploadConfigOut:
    """Settings the admin UI needs for unsigned browser uploads."""
    if not Config.CLOUDINARY_CLOUD_NAME:
        raise BadRequestError("Cloudinary CloudName is not configured")
    if not Config.CLOUDINARY_UPLOAD_PRESET:
        raise BadRequestError("Cloudinary UploadPreset is not configured")
    return UploadConfigOut(
        cloud_name=Config.CLOUDINARY_CLOUD_NAME,
        upload_preset=Config.CLOUDINARY_UPLOAD_PRESET,
    )
