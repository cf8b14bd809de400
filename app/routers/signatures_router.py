# /app/routers/signatures_router.py

from fastapi import APIRouter, UploadFile, File, status

from ..core.exceptions import GradingValidationError
from ..services import storage_service
from ..models import assignment_model

router = APIRouter()

ALLOWED_SIGNATURE_EXTENSIONS = (".png", ".jpg", ".jpeg")


@router.post(
    "",
    response_model=assignment_model.SignatureUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a Faculty Signature"
)
async def upload_signature(file: UploadFile = File(..., description="A PNG or JPEG image of the signature.")):
    filename = (file.filename or "").lower()
    if not filename.endswith(ALLOWED_SIGNATURE_EXTENSIONS):
        raise GradingValidationError("Signatures must be PNG or JPEG images.")

    file_bytes = await file.read()
    if not file_bytes:
        raise GradingValidationError("The signature file is empty.")

    object_path = storage_service.build_object_name(storage_service.SIGNATURES_PREFIX, filename, name_hint="signature-")
    public_url = storage_service.upload(storage_service.SIGNATURES_BUCKET, object_path, file_bytes)
    print(f"Signature uploaded successfully: {public_url}")
    return {"url": public_url, "path": object_path}
