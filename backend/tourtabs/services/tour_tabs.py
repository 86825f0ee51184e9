import logging
from typing import Iterable, List, Optional

from tourtabs.conditions.schema import ConditionOptions
from tourtabs.schemas.tour_tab import TabDraft, TourTab
from tourtabs.services.api_client import ApiClient, unwrap

logger = logging.getLogger(__name__)


def list_tabs(client: ApiClient, is_active: Optional[str] = None) -> List[TourTab]:
    params = {"is_active": is_active} if is_active else None
    items = unwrap(client.get("/tour-tabs", params=params)) or []
    return [TourTab.model_validate(item) for item in items]


def get_tab(client: ApiClient, tab_id: int) -> TourTab:
    return TourTab.model_validate(unwrap(client.get(f"/tour-tabs/{tab_id}")))


def create_tab(client: ApiClient, draft: TabDraft) -> TourTab:
    tab = TourTab.model_validate(unwrap(client.post("/tour-tabs", draft.to_payload())))
    logger.info("Tour tab %s created (%d conditions)", tab.id, len(draft.conditions))
    return tab


def update_tab(client: ApiClient, tab_id: int, draft: TabDraft) -> TourTab:
    tab = TourTab.model_validate(unwrap(client.put(f"/tour-tabs/{tab_id}", draft.to_payload())))
    logger.info("Tour tab %s updated (%d conditions)", tab_id, len(draft.conditions))
    return tab


def delete_tab(client: ApiClient, tab_id: int) -> None:
    client.delete(f"/tour-tabs/{tab_id}")
    logger.info("Tour tab %s deleted", tab_id)


def toggle_tab_status(client: ApiClient, tab_id: int) -> None:
    client.patch(f"/tour-tabs/{tab_id}/toggle-status")
    logger.info("Tour tab %s status toggled", tab_id)


def reorder_tabs(client: ApiClient, tab_ids: Iterable[int]) -> None:
    items = [{"id": tab_id, "sort_order": position} for position, tab_id in enumerate(tab_ids)]
    client.post("/tour-tabs/reorder", {"items": items})
    logger.info("Tour tabs reordered: %s", [item["id"] for item in items])


def get_condition_options(client: ApiClient) -> ConditionOptions:
    return ConditionOptions.model_validate(unwrap(client.get("/tour-tabs/condition-options")) or {})


def sort_tabs(tabs: Iterable[TourTab]) -> List[TourTab]:
    """Active tabs first, then by sort order."""
    return sorted(tabs, key=lambda t: (not t.is_active, t.sort_order or 0))


def search_tabs(tabs: Iterable[TourTab], search: str) -> List[TourTab]:
    search = (search or "").strip().lower()
    if not search:
        return list(tabs)
    return [
        t for t in tabs
        if search in t.name.lower()
        or search in (t.slug or "").lower()
        or search in (t.description or "").lower()
    ]
