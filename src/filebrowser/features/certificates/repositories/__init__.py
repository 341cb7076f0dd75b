from .certificate_repository import (
    CERTIFICATES_COLLECTION,
    DocumentCertificateRepository,
    decode_certificate,
    encode_certificate,
)

__all__ = [
    "CERTIFICATES_COLLECTION",
    "DocumentCertificateRepository",
    "decode_certificate",
    "encode_certificate",
]
