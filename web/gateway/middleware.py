"""Middleware that assigns and propagates a request identifier.

Every incoming HTTP request receives a request identifier (UUID). The
identifier is read from the incoming ``X-Request-Id`` header when provided
by the client, or generated server-side otherwise. The middleware stores the
id on the ``request`` object, in a context variable and in the diagnostic
context so code running downstream (services, adapters, log filters) can
access it without passing the value explicitly.

Behavior contract:
- If the incoming request contains the ``X-Request-Id`` header, that value
  is reused as the request id.
- Otherwise a new UUIDv4 is generated.
- The response will include the same id in the ``X-Request-ID`` header.
- Both context variables are restored when the response leaves, also when
  the view raised, so ids never leak into the next request served by the
  same thread.
"""

import uuid
import contextvars

from django.utils.deprecation import MiddlewareMixin

from apps.core.logging import DIAGNOSTIC_CTX, current_context

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")


class RequestIdMiddleware(MiddlewareMixin):
    """Django middleware that sets and returns a per-request identifier.

    Attributes:
        HEADER (str): The name of the incoming HTTP header (in Django's
            ``request.META`` casing) that may contain a client-provided id.
        RESPONSE_HEADER (str): The name of the header returned on responses.
    """

    HEADER = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"

    def process_request(self, request):
        """Attach the request id to the request and bind it to the context.

        Args:
            request: Django HttpRequest instance.
        """
        rid = request.META.get(self.HEADER) or str(uuid.uuid4())
        request.request_id = rid
        request._request_id_tokens = (
            REQUEST_ID_CTX.set(rid),
            DIAGNOSTIC_CTX.set({**current_context(), "correlationId": rid}),
        )

    def process_response(self, request, response):
        """Set the ``X-Request-ID`` header and unbind the request context.

        Args:
            request: Django HttpRequest.
            response: Django HttpResponse to modify.

        Returns:
            The same HttpResponse instance with the ``X-Request-ID`` header set.
        """
        rid = getattr(request, "request_id", REQUEST_ID_CTX.get())
        response[self.RESPONSE_HEADER] = rid
        tokens = getattr(request, "_request_id_tokens", None)
        if tokens:
            rid_token, ctx_token = tokens
            DIAGNOSTIC_CTX.reset(ctx_token)
            REQUEST_ID_CTX.reset(rid_token)
            request._request_id_tokens = None
        return response
