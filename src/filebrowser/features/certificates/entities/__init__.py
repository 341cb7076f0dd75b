"""Certificate entities and protocols."""

from .certificate import CERTIFICATE_PERMISSIONS, Certificate
from .protocols import CertificateRepository

__all__ = ["CERTIFICATE_PERMISSIONS", "Certificate", "CertificateRepository"]
