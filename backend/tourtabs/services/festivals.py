import logging
from typing import List, Optional

from tourtabs.schemas.festival import FestivalDraft, FestivalHoliday, FestivalPageSetting, clean_cover_position
from tourtabs.services.api_client import ApiClient, unwrap

logger = logging.getLogger(__name__)

CARD_IMAGE = "image"
COVER_IMAGE = "cover_image"

# multipart field name and endpoint suffix per image slot
IMAGE_SLOTS = {
    CARD_IMAGE: ("image", "image"),
    COVER_IMAGE: ("cover_image", "cover-image"),
}


class AssetAttachError(Exception):
    """Raised when an image action targets a festival that has not been saved yet."""


def _require_id(festival_id: Optional[int]) -> int:
    if festival_id is None:
        raise AssetAttachError("ต้องบันทึกเทศกาลก่อนจึงจะแนบรูปภาพได้")
    return festival_id


def list_festivals(client: ApiClient) -> List[FestivalHoliday]:
    items = unwrap(client.get("/festival-holidays")) or []
    return sorted(
        (FestivalHoliday.model_validate(item) for item in items),
        key=lambda f: (f.sort_order, f.start_date),
    )


def get_festival(client: ApiClient, festival_id: int) -> FestivalHoliday:
    return FestivalHoliday.model_validate(unwrap(client.get(f"/festival-holidays/{festival_id}")))


def create_festival(client: ApiClient, draft: FestivalDraft) -> FestivalHoliday:
    festival = FestivalHoliday.model_validate(unwrap(client.post("/festival-holidays", draft.to_payload())))
    logger.info("Festival %s created (%s - %s)", festival.id, draft.start_date, draft.end_date)
    return festival


def update_festival(client: ApiClient, festival_id: int, draft: FestivalDraft) -> FestivalHoliday:
    festival = FestivalHoliday.model_validate(
        unwrap(client.put(f"/festival-holidays/{festival_id}", draft.to_payload()))
    )
    logger.info("Festival %s updated", festival_id)
    return festival


def delete_festival(client: ApiClient, festival_id: int) -> None:
    client.delete(f"/festival-holidays/{festival_id}")
    logger.info("Festival %s deleted", festival_id)


def toggle_festival_status(client: ApiClient, festival_id: int) -> None:
    client.patch(f"/festival-holidays/{festival_id}/toggle-status")
    logger.info("Festival %s status toggled", festival_id)


def upload_festival_image(client: ApiClient, festival_id: Optional[int], slot: str,
                          filename: str, content: bytes, content_type: str) -> FestivalHoliday:
    festival_id = _require_id(festival_id)
    field, suffix = IMAGE_SLOTS[slot]
    data = client.upload(f"/festival-holidays/{festival_id}/{suffix}", field, filename, content, content_type)
    logger.info("Festival %s %s uploaded (%s)", festival_id, slot, filename)
    return FestivalHoliday.model_validate(unwrap(data))


def delete_festival_image(client: ApiClient, festival_id: Optional[int], slot: str) -> None:
    festival_id = _require_id(festival_id)
    _, suffix = IMAGE_SLOTS[slot]
    client.delete(f"/festival-holidays/{festival_id}/{suffix}")
    logger.info("Festival %s %s deleted", festival_id, slot)


def set_festival_cover_position(client: ApiClient, festival_id: Optional[int], position: str) -> None:
    festival_id = _require_id(festival_id)
    client.put(f"/festival-holidays/{festival_id}", {"cover_image_position": clean_cover_position(position)})


def get_page_setting(client: ApiClient) -> FestivalPageSetting:
    return FestivalPageSetting.model_validate(unwrap(client.get("/festival-page-settings")) or {})


def set_page_cover_position(client: ApiClient, position: str) -> FestivalPageSetting:
    data = client.put("/festival-page-settings", {"cover_image_position": clean_cover_position(position)})
    return FestivalPageSetting.model_validate(unwrap(data) or {})


def upload_page_cover(client: ApiClient, filename: str, content: bytes, content_type: str) -> FestivalPageSetting:
    data = client.upload("/festival-page-settings/cover-image", "cover_image", filename, content, content_type)
    logger.info("Festival page cover uploaded (%s)", filename)
    return FestivalPageSetting.model_validate(unwrap(data) or {})


def delete_page_cover(client: ApiClient) -> None:
    client.delete("/festival-page-settings/cover-image")
    logger.info("Festival page cover deleted")
