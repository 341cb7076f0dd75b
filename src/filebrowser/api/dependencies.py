"""FastAPI dependencies: service container and caller identity."""

import logging
import re

from fastapi import Depends, Request

from ..container import ServiceContainer
from ..core.exceptions import InvalidHeaderError, UnauthorizedError
from ..features.events.entities.payloads import INT32_MAX, INT32_MIN

logger = logging.getLogger(__name__)

USER_ID_PATTERN = re.compile(r"-?[0-9]+")


def get_container(request: Request) -> ServiceContainer:
    """Service container stored in app state at start-up."""
    return request.app.state.container


def parse_user_id(value: str) -> int:
    """Parse a decimal int32 user id.

    Only ASCII digits with an optional leading minus are accepted.

    Raises:
        InvalidHeaderError: not a decimal int32
    """
    if not USER_ID_PATTERN.fullmatch(value):
        raise InvalidHeaderError(f"Invalid user id: {value!r}")

    user_id = int(value, 10)

    if not INT32_MIN <= user_id <= INT32_MAX:
        raise InvalidHeaderError(f"User id out of range: {value!r}")
    return user_id


def get_user_id(request: Request, container: ServiceContainer = Depends(get_container)) -> int:
    """Caller id from the configured uid header.

    Raises:
        UnauthorizedError: header missing, or the reserved id 0
        InvalidHeaderError: header malformed
    """
    header = container.settings.uid_header
    value = request.headers.get(header)
    if not value:
        raise UnauthorizedError(f"Missing {header} header")

    try:
        user_id = parse_user_id(value)
    except InvalidHeaderError:
        logger.warning(f"Unparsable {header} header: {value!r}")
        raise

    if user_id == 0:
        raise UnauthorizedError(f"{header} header carries no user")
    return user_id
