"""Certificate signing and verification.

Tokens are compact JWS signed with ES256 (ECDSA over P-256 with SHA-256).
Claims::

    iss        configured token issuer
    sub        user id, base 16
    jti        certificate id
    iat, nbf   issuance time
    exp        issuance time plus TTL, absent when no TTL is configured
    file_id    file the certificate grants access to
    can_read, can_write, is_owner
"""

import base64
import binascii
import logging
import time
from datetime import timedelta
from typing import Any, Dict, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jose import ExpiredSignatureError, JWTError, jwt

from ....core.exceptions import (
    InvalidFormatError,
    InvalidTokenError,
    TokenExpiredError,
    TokenNotYetValidError,
    UnidentifiedError,
)
from ...files.entities.file import Permission
from ..entities.certificate import Certificate

logger = logging.getLogger(__name__)

SIGNING_ALGORITHM = "ES256"
USER_ID_BASE = 16


def load_signing_key(encoded: str) -> ec.EllipticCurvePrivateKey:
    """Load a base64 encoded PKCS#8 P-256 private key, PEM or DER.

    Raises:
        InvalidFormatError: not base64, not PKCS#8 or not on P-256
    """
    try:
        text = encoded.strip()
        raw = base64.b64decode(text + "=" * (-len(text) % 4))
        if raw.lstrip().startswith(b"-----BEGIN"):
            key = serialization.load_pem_private_key(raw, password=None)
        else:
            key = serialization.load_der_private_key(raw, password=None)
    except (binascii.Error, ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidFormatError(f"Invalid token signing key: {e}") from e

    if not isinstance(key, ec.EllipticCurvePrivateKey) or not isinstance(key.curve, ec.SECP256R1):
        raise InvalidFormatError("Token signing key must be an elliptic curve key over P-256")
    return key


class CertificateEngine:
    """Issues, signs and parses file access certificates.

    The signing key is read only once constructed, so one engine is shared
    by every request.
    """

    def __init__(
        self,
        signing_key: ec.EllipticCurvePrivateKey,
        issuer: str,
        ttl: Optional[timedelta] = None,
    ):
        self._issuer = issuer
        self._ttl = ttl
        self._private_pem = signing_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode("ascii")
        self._public_pem = signing_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")

    @classmethod
    def from_encoded_key(cls, encoded: str, issuer: str, ttl: Optional[timedelta] = None) -> "CertificateEngine":
        return cls(load_signing_key(encoded), issuer, ttl)

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def ttl(self) -> Optional[timedelta]:
        return self._ttl

    def claims(self, certificate: Certificate, now: Optional[int] = None) -> Dict[str, Any]:
        """Claims for ``certificate`` issued at ``now``.

        Raises:
            UnidentifiedError: the certificate has not been persisted yet
        """
        if not certificate.id:
            raise UnidentifiedError(
                "Certificate must be persisted before signing",
                details={"file_id": certificate.file_id, "user_id": certificate.user_id},
            )

        issued_at = int(time.time()) if now is None else now
        claims = {
            "iss": self._issuer,
            "sub": format(certificate.user_id, "x"),
            "jti": certificate.id,
            "iat": issued_at,
            "nbf": issued_at,
            "file_id": certificate.file_id,
            "can_read": certificate.can_read,
            "can_write": certificate.can_write,
            "is_owner": certificate.is_owner,
        }
        if self._ttl is not None:
            claims["exp"] = issued_at + int(self._ttl.total_seconds())
        return claims

    def sign(self, certificate: Certificate) -> str:
        """Sign ``certificate`` in place and return its token.

        A signed certificate keeps its token.
        """
        if certificate.is_signed:
            return certificate.token

        claims = self.claims(certificate)
        certificate.token = jwt.encode(claims, self._private_pem, algorithm=SIGNING_ALGORITHM)
        certificate.issuer = claims["iss"]
        certificate.issued_at = claims["iat"]
        certificate.not_before = claims["nbf"]
        certificate.expires_at = claims.get("exp")

        logger.debug(f"Signed certificate {certificate.id} for user {certificate.user_id}")
        return certificate.token

    def parse(self, token: str) -> Certificate:
        """Verify ``token`` and return the certificate it carries.

        Raises:
            TokenExpiredError: past ``exp``
            TokenNotYetValidError: before ``nbf``
            InvalidTokenError: malformed, foreign issuer or bad signature
        """
        try:
            claims = jwt.decode(
                token,
                self._public_pem,
                algorithms=[SIGNING_ALGORITHM],
                issuer=self._issuer,
                options={"verify_aud": False, "verify_nbf": False},
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Certificate has expired") from e
        except JWTError as e:
            logger.debug(f"Certificate token rejected: {e}")
            raise InvalidTokenError(f"Invalid certificate token: {e}") from e

        not_before = claims.get("nbf")
        if not_before is not None and int(not_before) > int(time.time()):
            raise TokenNotYetValidError("Certificate is not valid yet")

        try:
            permissions = Permission.NONE
            if claims.get("can_read"):
                permissions |= Permission.READ
            if claims.get("can_write"):
                permissions |= Permission.WRITE
            if claims.get("is_owner"):
                permissions |= Permission.OWNER

            return Certificate(
                id=claims["jti"],
                file_id=claims["file_id"],
                user_id=int(claims["sub"], USER_ID_BASE),
                permissions=permissions,
                issuer=claims.get("iss"),
                issued_at=claims.get("iat"),
                not_before=not_before,
                expires_at=claims.get("exp"),
                token=token,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Incomplete certificate claims: {e}") from e
