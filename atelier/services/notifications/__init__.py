from .notification_service import Notification, NotificationCenter, NotificationSeverity

__all__ = ["Notification", "NotificationCenter", "NotificationSeverity"]
