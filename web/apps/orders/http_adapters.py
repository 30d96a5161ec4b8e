"""HTTP event publisher with request correlation.

``HttpEventPublisher`` implements ``EventPublisherPort`` by posting each
event to a broker bridge (an HTTP endpoint in front of the message broker)
using ``httpx``. The topic is configuration. The request id set by the
gateway middleware is propagated as ``X-Request-ID``.

Exactly one attempt is made per event: transport errors and non-2xx
responses propagate to the caller.
"""

from typing import Optional

import httpx
from django.conf import settings
from django.utils.module_loading import import_string

from .domain import Event, EventPublisherPort

REQUEST_ID_CTX = import_string("gateway.middleware.REQUEST_ID_CTX")


def _request_headers(extra: Optional[dict] = None) -> dict:
    """Build base headers including X-Request-ID and any extras.

    Args:
        extra: Optional dict of additional headers to include.

    Returns:
        dict: Final headers dictionary for the outgoing request.
    """
    headers: dict[str, str] = {}
    rid = REQUEST_ID_CTX.get()
    if rid and rid != "-":
        headers["X-Request-ID"] = rid
    if extra:
        headers.update(extra)
    return headers


class HttpEventPublisher(EventPublisherPort):
    """Publishes events to ``{base_url}/topics/{topic}/events``.

    Args:
        base_url: Broker bridge URL, defaults to ``settings.EVENTS_BASE_URL``.
        topic: Topic name, defaults to ``settings.EVENTS_TOPIC``.
        timeout: Request timeout in seconds, defaults to
            ``settings.HTTP_TIMEOUT_SECS``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        topic: str | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or settings.EVENTS_BASE_URL).rstrip("/")
        self.topic = topic or getattr(settings, "EVENTS_TOPIC", "orders")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECS

    def publish(self, event: Event) -> None:
        """Send one event.

        The event id is used as the message key so all events of an order
        land on the same partition.

        Raises:
            httpx.RequestError: For network/transport errors.
            httpx.HTTPStatusError: For non-2xx responses.
        """
        payload = {"key": event.id, "name": event.name, "data": event.data}
        headers = _request_headers({"X-Event-Name": event.name})
        with httpx.Client(timeout=self.timeout) as client:
            resp = client.post(f"{self.base_url}/topics/{self.topic}/events", json=payload, headers=headers)
            resp.raise_for_status()
