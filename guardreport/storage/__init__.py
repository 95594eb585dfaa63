"""
Storage layer for Guard Report - MongoDB persistence via Motor.

This package provides:
- Connection management (client creation, startup ping)
- Document models (LoginEvent, Report, ReportFields, Position)
- PersistenceGateway, the only writer and reader of records
"""

from .connection import create_client, open_client, get_db_info
from .gateway import PersistenceGateway, REPORTS_COLLECTION, USERS_COLLECTION
from .models import LoginEvent, Position, Report, ReportFields

__all__ = [
    # Connection
    "create_client",
    "open_client",
    "get_db_info",
    # Gateway
    "PersistenceGateway",
    "REPORTS_COLLECTION",
    "USERS_COLLECTION",
    # Models
    "LoginEvent",
    "Position",
    "Report",
    "ReportFields",
]
