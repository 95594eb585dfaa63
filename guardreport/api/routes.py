"""Login and incident report API routes."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from guardreport.api.dependencies import get_notifier, get_persistence
from guardreport.errors import MailError, StorageError
from guardreport.notifications import NotificationGateway
from guardreport.storage import PersistenceGateway, ReportFields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reports"])

LOGIN_RECORDED = "✅ Inloggning registrerad"
LOGIN_FAILED = "Serverfel vid registrering av användare"
REPORT_SENT = "✅ Rapport sparad och skickad via e-post"
REPORT_SAVED_MAIL_FAILED = "⚠️ Rapport sparad, men kunde inte skicka e-post"
REPORT_FAILED = "Serverfel vid skapande av rapport"
REPORTS_FETCH_FAILED = "Kunde inte hämta rapporter"


class LoginRequest(BaseModel):
    username: Optional[str] = None


def error_response(status_code: int, message: str) -> JSONResponse:
    """JSON error body shared by every endpoint: {"error": message}."""
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/login", status_code=201)
async def login(
    payload: LoginRequest,
    persistence: PersistenceGateway = Depends(get_persistence),
):
    """Record a check-in for the given username."""
    try:
        user = await persistence.record_login(payload.username)
    except StorageError:
        return error_response(500, LOGIN_FAILED)

    return {"message": LOGIN_RECORDED, "user": user.to_response()}


@router.post("/report", status_code=201)
async def submit_report(
    fields: ReportFields,
    persistence: PersistenceGateway = Depends(get_persistence),
    notifier: NotificationGateway = Depends(get_notifier),
) -> Dict[str, Any]:
    """
    Save a report, then email it to the administrator.

    The two steps succeed or fail independently: once the report is saved a
    mail failure is answered with 201 and a message saying so.
    """
    try:
        report = await persistence.record_report(fields)
    except StorageError:
        return error_response(500, REPORT_FAILED)

    try:
        await notifier.send_report_email(report)
    except MailError:
        logger.warning(f"Report {report.id} saved without email notification")
        return {"message": REPORT_SAVED_MAIL_FAILED}

    return {"message": REPORT_SENT}


@router.get("/reports")
async def list_reports(
    persistence: PersistenceGateway = Depends(get_persistence),
) -> List[Dict[str, Any]]:
    """All reports, newest first."""
    try:
        reports = await persistence.list_reports()
    except StorageError:
        return error_response(500, REPORTS_FETCH_FAILED)

    return [report.to_response() for report in reports]
