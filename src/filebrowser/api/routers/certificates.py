"""Certificate endpoints."""

from fastapi import APIRouter, Depends

from ...container import ServiceContainer
from ..dependencies import get_container, get_user_id
from ..models import CertificateResponse

router = APIRouter(prefix="/certificates", tags=["Certificates"])


@router.get("/{file_id}", response_model=CertificateResponse, summary="Get a file access certificate")
async def get_certificate(
    file_id: str,
    user_id: int = Depends(get_user_id),
    container: ServiceContainer = Depends(get_container),
) -> CertificateResponse:
    certificate = await container.certificates.get(user_id, file_id)
    return CertificateResponse.from_entity(certificate)
