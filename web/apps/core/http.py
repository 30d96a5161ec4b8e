"""DRF transport adapter for services.

Views stay small: they hand the service, the request and a body parser to
``execute_service`` and return the resulting ``Response``. The caller is
identified before the body is decoded, so an anonymous request is answered
with UNAUTHORIZED whatever its payload. The HTTP code is derived from the
envelope status only.
"""

from typing import Any, Callable, Optional

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

from .envelope import ServiceInput, ServiceOutput, ServiceStatus, User
from .service import UNAUTHORIZED_MESSAGE, Service


STATUS_HTTP_CODES = {
    ServiceStatus.SUCCESS: status.HTTP_200_OK,
    ServiceStatus.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ServiceStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ServiceStatus.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ServiceStatus.CONFLICT: status.HTTP_409_CONFLICT,
    ServiceStatus.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ServiceStatus.FAILURE: status.HTTP_400_BAD_REQUEST,
}


def http_status_for(output: ServiceOutput) -> int:
    """Map an envelope to its HTTP status code."""
    return STATUS_HTTP_CODES[output.status]


def user_from_request(request) -> Optional[User]:
    """Build the caller identity from the ``X-User-*`` headers.

    Falls back to ``settings.API_DEFAULT_USER`` (a dict with ``id``,
    ``email`` and ``role``) when no ``X-User-Id`` header is sent.

    Returns:
        User | None: None when the caller cannot be identified.
    """
    uid = request.headers.get("X-User-Id")
    if uid:
        return User(
            id=uid,
            email=request.headers.get("X-User-Email"),
            role=request.headers.get("X-User-Role"),
        )
    default = getattr(settings, "API_DEFAULT_USER", None)
    if default:
        return User(id=default.get("id"), email=default.get("email"), role=default.get("role"))
    return None


def envelope_response(
    output: ServiceOutput, serialize: Optional[Callable[[Any], Any]] = None
) -> Response:
    """Render an envelope as ``{status, data, errorMessage}``.

    Args:
        output: Envelope to render.
        serialize: Converts the success payload to JSON-compatible data.
    """
    data = serialize(output.data) if serialize and output.data is not None else None
    return Response(output.to_dict(data), status=http_status_for(output))


def execute_service(
    service: Service,
    request,
    parse_input: Callable[[Any], Any],
    serialize: Optional[Callable[[Any], Any]] = None,
) -> Response:
    """Identify the caller, parse the body, run ``service`` and render the outcome.

    Args:
        service: Service to run.
        request: DRF request.
        parse_input: Builds the operation input from ``request``. It may
            return a ``ServiceOutput`` instead, which is rendered as is
            (e.g. a ``VALIDATION_ERROR`` for a malformed body).
        serialize: Converts the success payload to JSON-compatible data.
    """
    user = user_from_request(request)
    if user is None:
        return envelope_response(ServiceOutput.unauthorized(UNAUTHORIZED_MESSAGE))

    data = parse_input(request)
    if isinstance(data, ServiceOutput):
        return envelope_response(data)

    output = service.handle(ServiceInput(user=user, data=data))
    return envelope_response(output, serialize)
