import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from tourtabs.auth.dependencies import get_api_client
from tourtabs.core.constants import (
    BADGE_COLORS,
    BADGE_ICONS,
    COVER_POSITIONS,
    FESTIVAL_DEFAULT_BADGE_COLOR,
    FESTIVAL_DISPLAY_MODES,
    GENERIC_ERROR,
)
from tourtabs.core.templates import templates
from tourtabs.schemas.common import form_bool
from tourtabs.schemas.festival import FestivalDraft
from tourtabs.services.api_client import ApiClient, ApiError, ValidationFailed
from tourtabs.services.festivals import (
    CARD_IMAGE,
    COVER_IMAGE,
    IMAGE_SLOTS,
    AssetAttachError,
    create_festival,
    delete_festival,
    delete_festival_image,
    delete_page_cover,
    get_festival,
    get_page_setting,
    list_festivals,
    set_festival_cover_position,
    set_page_cover_position,
    toggle_festival_status,
    update_festival,
    upload_festival_image,
    upload_page_cover,
)
from tourtabs.services.preview import preview_festival
from tourtabs.utils.flash import flash_error, flash_redirect
from tourtabs.utils.forms import validation_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/festivals", tags=["Festival Tours"])


def render_form(
    request: Request,
    *,
    festival_id: Optional[int] = None,
    form=None,
    errors=None,
    status_code=200
):
    return templates.TemplateResponse(
        request,
        "festivals/form.html",
        {
            "festival_id": festival_id,
            "form": form or {},
            "errors": errors or {},
            "badge_colors": BADGE_COLORS,
            "badge_icons": BADGE_ICONS,
            "display_modes": FESTIVAL_DISPLAY_MODES,
        },
        status_code=status_code
    )


def _is_image(upload: UploadFile) -> bool:
    return bool(upload and upload.filename and (upload.content_type or "").startswith("image/"))


def _back_to_list(request: Request):
    return request.url_for("festival_list")


# =================================================
# LIST PAGE
# =================================================
@router.get("", response_class=HTMLResponse, name="festival_list")
def festival_list(
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    error = None
    try:
        festivals = list_festivals(client)
        page_setting = get_page_setting(client)
    except ApiError as e:
        logger.error("Failed to fetch festivals: %s", e.message)
        festivals, page_setting, error = [], None, GENERIC_ERROR

    return templates.TemplateResponse(
        request,
        "festivals/list.html",
        {
            "festivals": festivals,
            "page_setting": page_setting,
            "error": error,
            "display_mode_labels": dict(FESTIVAL_DISPLAY_MODES),
            "cover_positions": COVER_POSITIONS,
            "default_badge_color": FESTIVAL_DEFAULT_BADGE_COLOR,
        }
    )


# =================================================
# PAGE SETTINGS (listing page hero banner)
# =================================================
@router.post("/page-settings/cover-image", name="festival_page_cover_upload")
async def page_cover_upload(
    request: Request,
    cover_image: UploadFile = File(...),
    client: ApiClient = Depends(get_api_client),
):
    if not _is_image(cover_image):
        return flash_error(_back_to_list(request), "กรุณาเลือกไฟล์รูปภาพ")

    try:
        upload_page_cover(client, cover_image.filename, await cover_image.read(), cover_image.content_type)
    except ApiError as e:
        logger.error("Failed to upload festival page cover: %s", e.message)
        return flash_error(_back_to_list(request), "อัปโหลดรูปภาพไม่สำเร็จ")

    return flash_redirect(_back_to_list(request), "อัปโหลดภาพ Cover หลักเรียบร้อยแล้ว")


@router.post("/page-settings/cover-image/delete", name="festival_page_cover_delete")
def page_cover_delete(
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        delete_page_cover(client)
    except ApiError as e:
        logger.error("Failed to delete festival page cover: %s", e.message)
        return flash_error(_back_to_list(request), GENERIC_ERROR)

    return flash_redirect(_back_to_list(request), "ลบภาพ Cover หลักเรียบร้อยแล้ว")


@router.post("/page-settings/cover-position", name="festival_page_cover_position")
def page_cover_position(
    request: Request,
    position: str = Form(...),
    client: ApiClient = Depends(get_api_client),
):
    try:
        set_page_cover_position(client, position)
    except ApiError as e:
        logger.error("Failed to set festival page cover position: %s", e.message)
        return flash_error(_back_to_list(request), GENERIC_ERROR)

    return flash_redirect(_back_to_list(request), "บันทึกตำแหน่งภาพเรียบร้อยแล้ว")


# =================================================
# CREATE / EDIT
# =================================================
@router.get("/create", response_class=HTMLResponse, name="festival_create_page")
def create_page(request: Request, _=Depends(get_api_client)):
    return render_form(
        request,
        form={"badge_color": FESTIVAL_DEFAULT_BADGE_COLOR, "display_modes": ["card"], "is_active": True, "sort_order": 0},
    )


@router.get("/{festival_id}/edit", response_class=HTMLResponse, name="festival_edit_page")
def edit_page(
    festival_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        festival = get_festival(client, festival_id)
    except ApiError as e:
        logger.error("Failed to load festival %s: %s", festival_id, e.message)
        return flash_error(_back_to_list(request), "ไม่พบเทศกาล")

    return render_form(request, festival_id=festival_id, form=festival.model_dump())


def _save(request: Request, client: ApiClient, festival_id: Optional[int], form_data: dict):
    if not form_data["name"].strip() or not form_data["start_date"] or not form_data["end_date"]:
        return render_form(
            request,
            festival_id=festival_id,
            form=form_data,
            errors={"form": "กรุณากรอกชื่อเทศกาลและวันที่"},
            status_code=400
        )

    try:
        draft = FestivalDraft(**form_data)
    except ValidationError as e:
        return render_form(request, festival_id=festival_id, form=form_data, errors=validation_errors(e), status_code=400)

    try:
        if festival_id is None:
            create_festival(client, draft)
        else:
            update_festival(client, festival_id, draft)
    except ValidationFailed as e:
        errors = e.first_errors()
        errors["form"] = e.flat_message()
        return render_form(request, festival_id=festival_id, form=form_data, errors=errors, status_code=400)
    except ApiError as e:
        logger.error("Failed to save festival: %s", e.message)
        return render_form(
            request, festival_id=festival_id, form=form_data,
            errors={"form": e.message or GENERIC_ERROR}, status_code=400
        )

    return flash_redirect(url=_back_to_list(request), message="บันทึกเทศกาลเรียบร้อยแล้ว")


def _form_data(name, description, start_date, end_date, badge_text, badge_color,
               badge_icon, display_modes, is_active, sort_order) -> dict:
    return {
        "name": name,
        "description": description,
        "start_date": start_date,
        "end_date": end_date,
        "badge_text": badge_text,
        "badge_color": badge_color,
        "badge_icon": badge_icon,
        "display_modes": display_modes,
        "is_active": form_bool(is_active),
        "sort_order": sort_order or 0,
    }


@router.post("/create", response_class=HTMLResponse, name="festival_create")
def create(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    start_date: str = Form(""),
    end_date: str = Form(""),
    badge_text: str = Form(""),
    badge_color: str = Form(FESTIVAL_DEFAULT_BADGE_COLOR),
    badge_icon: str = Form(""),
    display_modes: List[str] = Form([]),
    is_active: Optional[str] = Form(None),
    sort_order: str = Form("0"),
    client: ApiClient = Depends(get_api_client),
):
    form_data = _form_data(name, description, start_date, end_date, badge_text, badge_color,
                           badge_icon, display_modes, is_active, sort_order)
    return _save(request, client, None, form_data)


@router.post("/{festival_id}/edit", response_class=HTMLResponse, name="festival_update")
def update(
    festival_id: int,
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    start_date: str = Form(""),
    end_date: str = Form(""),
    badge_text: str = Form(""),
    badge_color: str = Form(FESTIVAL_DEFAULT_BADGE_COLOR),
    badge_icon: str = Form(""),
    display_modes: List[str] = Form([]),
    is_active: Optional[str] = Form(None),
    sort_order: str = Form("0"),
    client: ApiClient = Depends(get_api_client),
):
    form_data = _form_data(name, description, start_date, end_date, badge_text, badge_color,
                           badge_icon, display_modes, is_active, sort_order)
    return _save(request, client, festival_id, form_data)


# =================================================
# PREVIEW
# =================================================
@router.get("/{festival_id}/preview", response_class=HTMLResponse, name="festival_preview")
def preview(
    festival_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        festival = get_festival(client, festival_id)
        result = preview_festival(client, festival_id)
    except ApiError as e:
        logger.error("Preview of festival %s failed: %s", festival_id, e.message)
        return flash_error(_back_to_list(request), "เกิดข้อผิดพลาดในการดึงตัวอย่าง")

    return templates.TemplateResponse(
        request,
        "festivals/preview.html",
        {
            "festival": festival,
            "preview": result,
            "default_badge_color": FESTIVAL_DEFAULT_BADGE_COLOR,
        }
    )


# =================================================
# STATUS / DELETE
# =================================================
@router.post("/{festival_id}/toggle", name="festival_toggle")
def toggle(
    festival_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        toggle_festival_status(client, festival_id)
    except ApiError as e:
        logger.error("Failed to toggle festival %s: %s", festival_id, e.message)
        return flash_error(_back_to_list(request), GENERIC_ERROR)

    return flash_redirect(_back_to_list(request), "เปลี่ยนสถานะเรียบร้อยแล้ว")


@router.post("/{festival_id}/delete", name="festival_delete")
def delete(
    festival_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        delete_festival(client, festival_id)
    except ApiError as e:
        logger.error("Failed to delete festival %s: %s", festival_id, e.message)
        return flash_error(_back_to_list(request), "เกิดข้อผิดพลาดในการลบ")

    return flash_redirect(_back_to_list(request), "ลบเทศกาลเรียบร้อยแล้ว")


# =================================================
# IMAGES (saved festivals only)
# =================================================
@router.post("/{festival_id}/images/{slot}", name="festival_image_upload")
async def upload_image(
    festival_id: int,
    slot: str,
    request: Request,
    image: UploadFile = File(...),
    client: ApiClient = Depends(get_api_client),
):
    if slot not in IMAGE_SLOTS:
        return flash_error(_back_to_list(request), "ไม่รู้จักประเภทรูปภาพ")
    if not _is_image(image):
        return flash_error(_back_to_list(request), "กรุณาเลือกไฟล์รูปภาพ")

    try:
        upload_festival_image(client, festival_id, slot, image.filename, await image.read(), image.content_type)
    except (ApiError, AssetAttachError) as e:
        logger.error("Failed to upload %s for festival %s: %s", slot, festival_id, e)
        return flash_error(_back_to_list(request), "อัปโหลดรูปภาพไม่สำเร็จ")

    return flash_redirect(_back_to_list(request), "อัปโหลดรูปภาพเรียบร้อยแล้ว")


@router.post("/{festival_id}/images/{slot}/delete", name="festival_image_delete")
def delete_image(
    festival_id: int,
    slot: str,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    if slot not in IMAGE_SLOTS:
        return flash_error(_back_to_list(request), "ไม่รู้จักประเภทรูปภาพ")

    try:
        delete_festival_image(client, festival_id, slot)
    except (ApiError, AssetAttachError) as e:
        logger.error("Failed to delete %s for festival %s: %s", slot, festival_id, e)
        return flash_error(_back_to_list(request), GENERIC_ERROR)

    label = "รูปปก" if slot == COVER_IMAGE else "รูปภาพ" if slot == CARD_IMAGE else slot
    return flash_redirect(_back_to_list(request), f"ลบ{label}เรียบร้อยแล้ว")


@router.post("/{festival_id}/cover-position", name="festival_cover_position")
def cover_position(
    festival_id: int,
    request: Request,
    position: str = Form(...),
    client: ApiClient = Depends(get_api_client),
):
    try:
        set_festival_cover_position(client, festival_id, position)
    except ApiError as e:
        logger.error("Failed to set cover position for festival %s: %s", festival_id, e.message)
        return flash_error(_back_to_list(request), GENERIC_ERROR)

    return flash_redirect(_back_to_list(request), "บันทึกตำแหน่งภาพเรียบร้อยแล้ว")
