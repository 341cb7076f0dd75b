from .certificate_engine import SIGNING_ALGORITHM, CertificateEngine, load_signing_key
from .certificate_service import CertificateService

__all__ = ["SIGNING_ALGORITHM", "CertificateEngine", "CertificateService", "load_signing_key"]
