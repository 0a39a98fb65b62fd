# storefront/services/notification_service.py
from decimal import Decimal

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia po zlozeniu zamowienia.
    Celery - wysylka poza cyklem zadania HTTP.
    """

    @staticmethod
    def send_order_placed(customer_id: int, order_id: int, total: Decimal):
        send_order_placed_task.delay(customer_id, order_id, str(total))


@celery_app.task(name="storefront.services.notification_service.send_order_placed_task")
def send_order_placed_task(customer_id: int, order_id: int, total: str):
    """
    Potwierdzenie zamowienia dla klienta.
    Dostarczenie (email/SMS) nalezy do zewnetrznej bramki, tu tylko log.
    """
    logger.info(f"[NOTIFICATION] Customer {customer_id}: order {order_id} placed, total {total}")

    return {"customer_id": customer_id, "order_id": order_id, "total": total, "status": "sent"}
