import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from tourtabs.auth.dependencies import get_api_client, get_session
from tourtabs.core.constants import GENERIC_ERROR
from tourtabs.core.templates import templates
from tourtabs.services.api_client import ApiClient, ApiError
from tourtabs.services.festivals import list_festivals
from tourtabs.services.tour_tabs import list_tabs

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"]
)


@router.get("", response_class=HTMLResponse, name="dashboard")
def dashboard(
    request: Request,
    session: dict = Depends(get_session),
    client: ApiClient = Depends(get_api_client),
):
    context = {"user_name": session.get("name"), "error": None, "stats": None}

    try:
        tabs = list_tabs(client)
        festivals = list_festivals(client)
    except ApiError as e:
        logger.error("Dashboard summary failed: %s", e.message)
        context["error"] = GENERIC_ERROR
    else:
        context["stats"] = {
            "tab_count": len(tabs),
            "active_tab_count": sum(1 for t in tabs if t.is_active),
            "festival_count": len(festivals),
            "active_festival_count": sum(1 for f in festivals if f.is_active),
        }

    return templates.TemplateResponse(request, "dashboard.html", context)
