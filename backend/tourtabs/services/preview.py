"""
Preview proxies.

Matching is evaluated by the backend against live inventory; these functions
only send the request and shape the response for display.
"""
import logging
from typing import Any, Optional

from pydantic import ValidationError

from tourtabs.schemas.preview import FestivalPreview, TabPreview
from tourtabs.schemas.tour_tab import TabDraft
from tourtabs.services.api_client import ApiClient, NetworkError, unwrap

logger = logging.getLogger(__name__)


def _shape(model, data: Any):
    try:
        return model.model_validate(unwrap(data) or {})
    except ValidationError as e:
        logger.error("Malformed %s response: %s", model.__name__, e)
        raise NetworkError("Invalid response from server") from e


def preview_tab(client: ApiClient, tab_id: int, limit: Optional[int] = None) -> TabPreview:
    params = {"limit": limit} if limit else None
    return _shape(TabPreview, client.get(f"/tour-tabs/{tab_id}/preview", params=params))


def preview_draft(client: ApiClient, draft: TabDraft) -> TabPreview:
    """Preview conditions that have not been saved yet."""
    return _shape(TabPreview, client.post("/tour-tabs/preview-conditions", draft.preview_payload()))


def preview_festival(client: ApiClient, festival_id: int) -> FestivalPreview:
    return _shape(FestivalPreview, client.post(f"/festival-holidays/{festival_id}/preview-tours"))
