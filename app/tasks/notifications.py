import logging
from flask import current_app
from kombu.exceptions import OperationalError
from celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def notify_order_event_task(self, event: str, order_ids: list, recipient_ids: list) -> None:
    """Log an order event instead of pushing it to customers and vendors."""
    logger.info("[notify] %s orders=%s recipients=%s", event, order_ids, recipient_ids)


def dispatch_order_event(event: str, orders) -> None:
    """Queue a notification for the parties of ``orders``; never fails the caller."""
    order_ids = [o.id for o in orders]
    recipients = sorted({o.customer_id for o in orders} | {o.vendor_id for o in orders})
    try:
        if current_app.config.get("TESTING"):
            notify_order_event_task(event, order_ids, recipients)
        else:
            notify_order_event_task.delay(event, order_ids, recipients)
    except OperationalError as e:
        logger.error("Failed to queue %s notification: %s", event, e)
