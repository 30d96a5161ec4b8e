"""HTTP views for the orders app.

Views are kept intentionally small: they supply a Pydantic body parser and
let ``apps.core.http.execute_service`` identify the caller, parse the body,
run the orders service and render the returned envelope. An anonymous
caller gets UNAUTHORIZED before the body is looked at. The HTTP status is
derived from the envelope status by ``apps.core.http``.

The service is obtained from ``providers.get_create_order_service()`` so
tests can swap the wiring without changing view logic.
"""
from typing import Union

from pydantic import ValidationError
from rest_framework.exceptions import ParseError
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.envelope import ServiceOutput
from apps.core.http import execute_service
from . import providers
from .schemas import CreateOrderInput, CreateOrderOutput, describe_validation_error


class OrdersPingView(APIView):
    """Simple health-check endpoint for the orders module."""

    def get(self, request):
        """Return ``{"ok": true}`` with HTTP 200."""
        return Response({"ok": True})


class CreateOrderView(APIView):
    """``POST /api/v0/orders/create``: run ``Orders.CreateOrder``.

    The response body is always ``{status, data, errorMessage}``:

    - 200 with the created order in ``data``.
    - 400 with ``VALIDATION_ERROR`` when the body is malformed or breaks
      a business rule, or ``FAILURE`` when processing failed.
    - 403 with ``UNAUTHORIZED`` when the caller is missing or denied.
    """

    def post(self, request):
        return execute_service(
            providers.get_create_order_service(),
            request,
            parse_create_order,
            serialize=CreateOrderOutput.to_json,
        )


def parse_create_order(request) -> Union[CreateOrderInput, ServiceOutput]:
    """Decode the body into ``CreateOrderInput``.

    Returns:
        The parsed input, or a ``VALIDATION_ERROR`` envelope when the body is
        not JSON or a field has the wrong type.
    """
    try:
        raw = request.data
    except ParseError as e:
        return ServiceOutput.validation_error(f"Malformed request body: {e.detail}")

    try:
        return CreateOrderInput.model_validate(raw)
    except ValidationError as e:
        return ServiceOutput.validation_error(describe_validation_error(e))
