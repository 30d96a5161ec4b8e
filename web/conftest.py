import pytest


@pytest.fixture(autouse=True)
def use_stubs_for_tests(settings):
    """Log events instead of calling the broker bridge, with fresh wiring per test."""
    from apps.orders import providers

    settings.USE_HTTP_ADAPTERS = False
    settings.API_DEFAULT_USER = None
    settings.SERVICE_PERMISSIONS = {}
    settings.ORDERS_CREATE_PIPELINE = False
    settings.ORDERS_PUBLISH_FAILURE_POLICY = "log"
    settings.ORDERS_CREATE_HELPER_KEY = "CreateOrderHelperV0"
    providers.reset_providers()
    yield
    providers.reset_providers()


@pytest.fixture
def caller_headers():
    """Identity headers of an authorized caller."""
    return {"HTTP_X_USER_ID": "1", "HTTP_X_USER_EMAIL": "api-user@example.com", "HTTP_X_USER_ROLE": "USER"}
