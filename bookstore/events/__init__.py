"""
Best-effort event publication for catalog changes.
"""

from bookstore.events.notifier import (
    BOOK_CREATED,
    BOOK_UPDATED,
    STOCK_UPDATED,
    NotificationSink,
    NullNotificationSink,
    RabbitMQNotificationSink,
    BookEventNotifier,
    create_notification_sink,
)

__all__ = [
    "BOOK_CREATED",
    "BOOK_UPDATED",
    "STOCK_UPDATED",
    "NotificationSink",
    "NullNotificationSink",
    "RabbitMQNotificationSink",
    "BookEventNotifier",
    "create_notification_sink",
]
