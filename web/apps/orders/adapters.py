"""In-process adapters for the ``Notifier`` port.

``LoggingNotifier`` only writes a log line and is what tests and local
development use. ``EmailNotifier`` sends the order confirmation through
Django's mail backend. ``BackgroundNotifier`` wraps either of them (or
the HTTP mail API client) so delivery happens on a worker thread and never
delays the response.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from django.conf import settings
from django.core.mail import send_mail

from .domain import Notifier, OrderNotice

logger = logging.getLogger(__name__)

SHOP_NAME = "Crochê da Ruiva"


class LoggingNotifier(Notifier):
    """Stub implementation of ``Notifier`` that records the notice in the log."""

    def order_created(self, notice: OrderNotice) -> None:
        logger.info(
            "order confirmation (log only)",
            extra={"order_id": str(notice.order_id), "number": notice.number, "to": notice.customer_email},
        )


@dataclass(frozen=True)
class ConfirmationMail:
    subject: str
    text: str
    html: str


def render_confirmation(notice: OrderNotice) -> ConfirmationMail:
    """Build the Portuguese "order received" message sent to the customer."""
    text = (
        f"Olá {notice.customer_name},\n\n"
        "Seu pedido foi recebido e está sendo processado.\n"
        f"Número do pedido: #{notice.number}\n"
        f"Status: {notice.status.value}\n"
        f"Valor total: R$ {notice.total_price:.2f}\n\n"
        "Em breve entraremos em contato para confirmar os detalhes.\n\n"
        f"Atenciosamente,\nEquipe {SHOP_NAME}\n"
    )
    html = (
        "<h1>Obrigado pelo seu pedido!</h1>"
        f"<p>Olá {notice.customer_name},</p>"
        "<p>Seu pedido foi recebido e está sendo processado.</p>"
        f"<p>Número do pedido: #{notice.number}</p>"
        f"<p>Status: {notice.status.value}</p>"
        f"<p>Valor total: R$ {notice.total_price:.2f}</p>"
        "<p>Em breve entraremos em contato para confirmar os detalhes.</p>"
        f"<p>Atenciosamente,<br>Equipe {SHOP_NAME}</p>"
    )
    return ConfirmationMail(subject=f"Pedido #{notice.number} Recebido", text=text, html=html)


class EmailNotifier(Notifier):
    """Send the order confirmation email with ``django.core.mail``."""

    def __init__(self, from_email: str | None = None):
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def order_created(self, notice: OrderNotice) -> None:
        """Email the customer that their order was received.

        Raises whatever the mail backend raises; the caller decides whether
        delivery failures matter.
        """
        mail = render_confirmation(notice)
        send_mail(
            mail.subject,
            mail.text,
            self.from_email,
            [notice.customer_email],
            fail_silently=False,
            html_message=mail.html,
        )
        logger.info("order confirmation sent", extra={"order_id": str(notice.order_id), "number": notice.number})


# Shared pool; notification delivery never touches the database.
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify")


class BackgroundNotifier(Notifier):
    """Run another notifier on a worker thread, logging failures."""

    def __init__(self, inner: Notifier, executor: ThreadPoolExecutor | None = None):
        self.inner = inner
        self.executor = executor or _executor

    def order_created(self, notice: OrderNotice) -> None:
        future = self.executor.submit(self.inner.order_created, notice)
        future.add_done_callback(lambda f: self._report(f, notice))

    @staticmethod
    def _report(future, notice: OrderNotice) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error(
                "order notification failed",
                extra={"order_id": str(notice.order_id), "error": repr(exc)},
                exc_info=exc,
            )
