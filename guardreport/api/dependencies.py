"""
FastAPI dependencies for the process-scoped gateways.

Both gateways are created once by the application lifespan (or passed to
create_app) and stored on app.state.
"""

from fastapi import Request

from guardreport.notifications import NotificationGateway
from guardreport.storage import PersistenceGateway


def get_persistence(request: Request) -> PersistenceGateway:
    """
    Usage:
        @router.get("/reports")
        async def list_reports(persistence: PersistenceGateway = Depends(get_persistence)):
            return await persistence.list_reports()
    """
    return request.app.state.persistence


def get_notifier(request: Request) -> NotificationGateway:
    return request.app.state.notifier
