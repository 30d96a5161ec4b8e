"""Service provider helpers for wiring the orders services.

The helper registry and the services are built once per process from
settings and then shared by every request. ``get_create_order_service``
picks the event publisher: the HTTP broker bridge client when
``settings.USE_HTTP_ADAPTERS`` is truthy, otherwise a publisher that writes
events to the log, suitable for tests and local development.

A helper key that is not registered makes the first call fail with
``HelperNotFoundError`` instead of degrading request by request.
"""

from functools import lru_cache

from django.conf import settings

from apps.core.authorization import RoleAuthorization
from apps.core.registry import HelperRegistry
from .adapters import LoggingEventPublisher
from .domain import CreateOrderHelper, EventPublisherPort
from .helpers import CreateOrderHelperV0
from .http_adapters import HttpEventPublisher
from .repository import OrderRepository
from .services import CreateOrderService
from .usecases import PUBLISH_FAILURE_LOG


def get_event_publisher() -> EventPublisherPort:
    """Return the event publisher selected by settings."""
    if getattr(settings, "USE_HTTP_ADAPTERS", False):
        return HttpEventPublisher()
    return LoggingEventPublisher(topic=getattr(settings, "EVENTS_TOPIC", "orders"))


@lru_cache(maxsize=None)
def get_create_order_helpers() -> HelperRegistry[CreateOrderHelper]:
    """Registry of create-order helpers, frozen after construction."""
    registry: HelperRegistry[CreateOrderHelper] = HelperRegistry()
    registry.register(
        CreateOrderHelperV0.key,
        CreateOrderHelperV0(store=OrderRepository(), publisher=get_event_publisher()),
    )
    return registry.freeze()


@lru_cache(maxsize=None)
def get_create_order_service() -> CreateOrderService:
    """Return the process-wide ``CreateOrderService``.

    Raises:
        HelperNotFoundError: If ``settings.ORDERS_CREATE_HELPER_KEY`` names
            no registered helper.
    """
    return CreateOrderService(
        registry=get_create_order_helpers(),
        authorization=RoleAuthorization(getattr(settings, "SERVICE_PERMISSIONS", {})),
        helper_key=getattr(settings, "ORDERS_CREATE_HELPER_KEY", CreateOrderHelperV0.key),
        publish_failure_policy=getattr(settings, "ORDERS_PUBLISH_FAILURE_POLICY", PUBLISH_FAILURE_LOG),
        pipeline=getattr(settings, "ORDERS_CREATE_PIPELINE", False),
    )


def reset_providers() -> None:
    """Drop cached registries and services so settings are read again."""
    get_create_order_service.cache_clear()
    get_create_order_helpers.cache_clear()
