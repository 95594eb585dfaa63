"""Outbound notifications: the administrator report email."""

from .mailer import NotificationGateway

__all__ = ["NotificationGateway"]
