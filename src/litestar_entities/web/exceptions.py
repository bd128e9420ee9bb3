"""Exception handling for the HTTP API.

Command rejections raised by entity and workflow handlers are turned into
``400 Bad Request`` responses carrying a failure reply.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from litestar import Response
from litestar.status_codes import HTTP_400_BAD_REQUEST

from litestar_entities.core.outcomes import Failure, outcome_to_dict

if TYPE_CHECKING:  # pragma: no cover
    from litestar import Request

    from litestar_entities.exceptions import DomainError

__all__ = ["domain_error_handler"]

logger = logging.getLogger(__name__)


def domain_error_handler(
    request: Request,
    exc: DomainError,
) -> Response:
    """Exception handler for DomainError.

    Args:
        request: The Litestar request object.
        exc: The rejected command's error.

    Returns:
        A 400 response with a ``{"type": "failure", "message": ...}`` body.
    """
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return Response(
        content=outcome_to_dict(Failure.of(str(exc))),
        status_code=HTTP_400_BAD_REQUEST,
    )
