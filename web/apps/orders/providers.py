"""Service provider helpers for wiring OrderLifecycleService with ports.

``get_order_service`` returns a service backed by the Django repositories
and the notifier selected by ``settings.NOTIFICATIONS_BACKEND``:

- ``email``: ``EmailNotifier`` (Django mail backend),
- ``http``: ``HttpMailClient`` (same mail through a provider HTTP API),
- ``log``: ``LoggingNotifier`` (tests and local development).

Unless ``settings.NOTIFICATIONS_ASYNC`` is false the notifier is wrapped in
``BackgroundNotifier`` so the request never waits for delivery. Settings
are read on every call, so tests can switch backends with the ``settings``
fixture.
"""

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .adapters import BackgroundNotifier, EmailNotifier, LoggingNotifier
from .domain import Notifier, OrderLifecycleService
from .http_adapters import HttpMailClient
from .repository import DjangoOrderStore, DjangoProductCatalog

_NOTIFIERS = {
    "email": EmailNotifier,
    "http": HttpMailClient,
    "log": LoggingNotifier,
}


def get_notifier() -> Notifier:
    """Return the configured notifier.

    Raises:
        ImproperlyConfigured: If ``NOTIFICATIONS_BACKEND`` is unknown.
    """
    backend = getattr(settings, "NOTIFICATIONS_BACKEND", "log")
    try:
        factory = _NOTIFIERS[backend]
    except KeyError:
        raise ImproperlyConfigured(f"Unknown NOTIFICATIONS_BACKEND: {backend!r}")
    notifier = factory()
    if getattr(settings, "NOTIFICATIONS_ASYNC", True):
        return BackgroundNotifier(notifier)
    return notifier


def get_order_service() -> OrderLifecycleService:
    return OrderLifecycleService(
        orders=DjangoOrderStore(),
        products=DjangoProductCatalog(),
        notifier=get_notifier(),
        strict_transitions=getattr(settings, "ORDER_STRICT_TRANSITIONS", True),
        max_number_retries=getattr(settings, "ORDER_NUMBER_MAX_RETRIES", 5),
    )
