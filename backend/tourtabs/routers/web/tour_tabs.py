import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from tourtabs.auth.dependencies import get_api_client
from tourtabs.conditions.builder import ConditionRow, TabRuleBuilder
from tourtabs.conditions.schema import ConditionOptions, InputKind, get_input, type_choices, type_label
from tourtabs.conditions.values import UnknownCondition
from tourtabs.core.constants import (
    BADGE_COLORS,
    BADGE_ICONS,
    DEFAULT_DISPLAY_LIMIT,
    DISPLAY_LIMIT_MAX,
    DISPLAY_LIMIT_MIN,
    GENERIC_ERROR,
    SORT_OPTIONS,
    TAB_DEFAULT_BADGE_COLOR,
    TAB_DISPLAY_MODES,
)
from tourtabs.core.templates import templates
from tourtabs.schemas.common import form_bool
from tourtabs.schemas.tour_tab import TabDraft
from tourtabs.services.api_client import ApiClient, ApiError, ValidationFailed
from tourtabs.services.preview import preview_draft, preview_tab
from tourtabs.services.tour_tabs import (
    create_tab,
    delete_tab,
    get_condition_options,
    get_tab,
    list_tabs,
    reorder_tabs,
    search_tabs,
    sort_tabs,
    toggle_tab_status,
    update_tab,
)
from tourtabs.utils.flash import flash_error, flash_redirect
from tourtabs.utils.forms import validation_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tour-tabs", tags=["Tour Tabs"])

TAB_TEXT_FIELDS = ("name", "slug", "description", "icon", "badge_text", "badge_color", "badge_icon", "badge_expires_at", "sort_by")


# -------------------------------------------------
# Helpers: form parsing
# -------------------------------------------------
def _condition_rows(form) -> list:
    try:
        count = int(form.get("condition_count") or 0)
    except ValueError:
        count = 0
    # capped at the rows actually submitted
    submitted = sum(1 for key in form.keys() if key.startswith("conditions-") and key.endswith("-type"))
    count = min(count, submitted)

    rows = []
    for i in range(count):
        type_key = form.get(f"conditions-{i}-type")
        if type_key is None:
            continue
        rows.append(ConditionRow(
            type=type_key,
            previous_type=form.get(f"conditions-{i}-previous_type") or "",
            values=tuple(form.getlist(f"conditions-{i}-value")),
            raw=form.get(f"conditions-{i}-raw") or "",
        ))
    return rows


def _tab_fields(form) -> dict:
    fields = {name: form.get(name) for name in TAB_TEXT_FIELDS}
    fields["name"] = fields["name"] or ""
    fields["sort_by"] = fields["sort_by"] or "popular"
    fields["display_modes"] = form.getlist("display_modes")
    fields["display_limit"] = form.get("display_limit") or DEFAULT_DISPLAY_LIMIT
    fields["sort_order"] = form.get("sort_order") or 0
    fields["is_active"] = form_bool(form.get("is_active"))
    return fields


def _empty_form() -> dict:
    return {
        "name": "",
        "badge_color": TAB_DEFAULT_BADGE_COLOR,
        "display_modes": ["tab"],
        "display_limit": DEFAULT_DISPLAY_LIMIT,
        "sort_by": "popular",
        "sort_order": 0,
        "is_active": True,
    }


def _apply_action(action: str, builder: TabRuleBuilder) -> None:
    if action == "add_condition":
        builder.add_condition()
    elif action.startswith("remove_condition:"):
        try:
            builder.remove_condition(int(action.split(":", 1)[1]))
        except (ValueError, IndexError):
            logger.warning("Ignoring invalid condition action %r", action)


# -------------------------------------------------
# Helpers: rendering
# -------------------------------------------------
def _scalar_value(condition) -> str:
    if condition.value is None:
        return ""
    if isinstance(condition.value, bool):
        return "true" if condition.value else "false"
    return str(condition.value)


def _condition_views(builder: TabRuleBuilder, options: ConditionOptions) -> list:
    views = []
    for index, condition in enumerate(builder.conditions):
        descriptor = get_input(condition.type, options)
        view = {
            "index": index,
            "type": condition.type,
            "label": type_label(condition.type),
            "input": descriptor,
            "known": not isinstance(condition, UnknownCondition),
            "value": "",
            "selected": [],
            "raw": "",
        }
        if isinstance(condition, UnknownCondition):
            view["raw"] = json.dumps(condition.value, ensure_ascii=False)
        elif condition.kind is InputKind.MULTISELECT:
            view["selected"] = [str(v) for v in condition.value]
        else:
            view["value"] = _scalar_value(condition)
        views.append(view)
    return views


def _form_values(fields: dict) -> dict:
    values = dict(fields)
    expires = values.get("badge_expires_at")
    if expires is not None and hasattr(expires, "strftime"):
        values["badge_expires_at"] = expires.strftime("%Y-%m-%dT%H:%M")
    return values


def _load_options(client: ApiClient) -> tuple:
    try:
        return get_condition_options(client), None
    except ApiError as e:
        logger.error("Condition options unavailable: %s", e.message)
        return ConditionOptions(), "โหลดตัวเลือกเงื่อนไขไม่สำเร็จ"


def render_form(
    request: Request,
    *,
    tab_id: Optional[int],
    form: dict,
    builder: TabRuleBuilder,
    options: ConditionOptions,
    errors=None,
    preview=None,
    preview_error=None,
    status_code=200
):
    return templates.TemplateResponse(
        request,
        "tour_tabs/form.html",
        {
            "tab_id": tab_id,
            "form": _form_values(form),
            "conditions": _condition_views(builder, options),
            "condition_types": type_choices(),
            "badge_colors": BADGE_COLORS,
            "badge_icons": BADGE_ICONS,
            "sort_options": SORT_OPTIONS,
            "display_modes": TAB_DISPLAY_MODES,
            "limit_min": DISPLAY_LIMIT_MIN,
            "limit_max": DISPLAY_LIMIT_MAX,
            "errors": errors or {},
            "preview": preview,
            "preview_error": preview_error,
        },
        status_code=status_code
    )


# =================================================
# LIST PAGE
# =================================================
@router.get("", response_class=HTMLResponse, name="tour_tab_list")
def tour_tab_list(
    request: Request,
    search: str = "",
    status: str = "",
    client: ApiClient = Depends(get_api_client),
):
    error = None
    try:
        tabs = sort_tabs(search_tabs(list_tabs(client, is_active=status or None), search))
    except ApiError as e:
        logger.error("Failed to fetch tabs: %s", e.message)
        tabs, error = [], GENERIC_ERROR

    return templates.TemplateResponse(
        request,
        "tour_tabs/list.html",
        {
            "tabs": tabs,
            "search": search,
            "status": status,
            "error": error,
            "sort_labels": dict(SORT_OPTIONS),
            "type_label": type_label,
        }
    )


# =================================================
# CREATE / EDIT
# =================================================
@router.get("/create", response_class=HTMLResponse, name="tour_tab_create_page")
def create_page(
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    options, options_error = _load_options(client)
    return render_form(
        request,
        tab_id=None,
        form=_empty_form(),
        builder=TabRuleBuilder(),
        options=options,
        errors={"options": options_error} if options_error else None,
    )


@router.get("/{tab_id}/edit", response_class=HTMLResponse, name="tour_tab_edit_page")
def edit_page(
    tab_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        tab = get_tab(client, tab_id)
    except ApiError as e:
        logger.error("Failed to load tab %s: %s", tab_id, e.message)
        return flash_error(request.url_for("tour_tab_list"), "ไม่พบ Tab")

    options, options_error = _load_options(client)
    return render_form(
        request,
        tab_id=tab_id,
        form=tab.model_dump(exclude={"id", "conditions"}),
        builder=tab.rule_builder(),
        options=options,
        errors={"options": options_error} if options_error else None,
    )


async def _submit(request: Request, client: ApiClient, tab_id: Optional[int]):
    form = await request.form()
    action = form.get("action") or "save"

    builder, errors = TabRuleBuilder.from_form(_condition_rows(form))
    _apply_action(action, builder)
    fields = _tab_fields(form)

    draft = None
    try:
        draft = TabDraft(**fields, conditions=builder.to_payload())
    except ValidationError as e:
        if action in ("save", "preview"):
            errors.update(validation_errors(e))

    options, options_error = _load_options(client)
    if options_error:
        errors.setdefault("options", options_error)

    def rerender(status_code=200, **extra):
        return render_form(
            request,
            tab_id=tab_id,
            form=fields,
            builder=builder,
            options=options,
            errors=errors,
            status_code=status_code,
            **extra
        )

    if action == "preview":
        if draft is None:
            return rerender(status_code=400)
        try:
            return rerender(preview=preview_draft(client, draft))
        except ApiError as e:
            logger.error("Draft preview failed: %s", e.message)
            return rerender(preview_error="เกิดข้อผิดพลาดในการดึงตัวอย่าง")

    if action != "save":
        return rerender()

    errors.update(builder.validate())
    errors.pop("options", None)
    if draft is None or errors:
        return rerender(status_code=400)

    try:
        if tab_id is None:
            create_tab(client, draft)
        else:
            update_tab(client, tab_id, draft)
    except ValidationFailed as e:
        errors.update(e.first_errors())
        errors.setdefault("form", e.message or GENERIC_ERROR)
        return rerender(status_code=400)
    except ApiError as e:
        logger.error("Failed to save tab: %s", e.message)
        errors["form"] = "เกิดข้อผิดพลาดในการบันทึก"
        return rerender(status_code=400)

    return flash_redirect(
        url=request.url_for("tour_tab_list"),
        message="บันทึก Tab เรียบร้อยแล้ว"
    )


@router.post("/create", response_class=HTMLResponse, name="tour_tab_create")
async def create(
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    return await _submit(request, client, tab_id=None)


@router.post("/{tab_id}/edit", response_class=HTMLResponse, name="tour_tab_update")
async def update(
    tab_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    return await _submit(request, client, tab_id=tab_id)


# =================================================
# PREVIEW
# =================================================
@router.get("/{tab_id}/preview", response_class=HTMLResponse, name="tour_tab_preview")
def preview(
    tab_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        tab = get_tab(client, tab_id)
        result = preview_tab(client, tab_id, limit=tab.display_limit)
    except ApiError as e:
        logger.error("Preview of tab %s failed: %s", tab_id, e.message)
        return flash_error(request.url_for("tour_tab_list"), "เกิดข้อผิดพลาดในการดึงตัวอย่าง")

    return templates.TemplateResponse(
        request,
        "tour_tabs/preview.html",
        {
            "tab": tab,
            "preview": result,
            "sort_labels": dict(SORT_OPTIONS),
        }
    )


# =================================================
# STATUS / DELETE / ORDER
# =================================================
@router.post("/{tab_id}/toggle", name="tour_tab_toggle")
def toggle(
    tab_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        toggle_tab_status(client, tab_id)
    except ApiError as e:
        logger.error("Failed to toggle tab %s: %s", tab_id, e.message)
        return flash_error(request.url_for("tour_tab_list"), GENERIC_ERROR)

    return flash_redirect(request.url_for("tour_tab_list"), "เปลี่ยนสถานะเรียบร้อยแล้ว")


@router.post("/{tab_id}/delete", name="tour_tab_delete")
def delete(
    tab_id: int,
    request: Request,
    client: ApiClient = Depends(get_api_client),
):
    try:
        delete_tab(client, tab_id)
    except ApiError as e:
        logger.error("Failed to delete tab %s: %s", tab_id, e.message)
        return flash_error(request.url_for("tour_tab_list"), "เกิดข้อผิดพลาดในการลบ")

    return flash_redirect(request.url_for("tour_tab_list"), "ลบ Tab เรียบร้อยแล้ว")


@router.post("/{tab_id}/move", name="tour_tab_move")
def move(
    tab_id: int,
    request: Request,
    direction: str = Form(...),
    client: ApiClient = Depends(get_api_client),
):
    try:
        ids = [t.id for t in sort_tabs(list_tabs(client))]
        if tab_id in ids:
            index = ids.index(tab_id)
            target = index - 1 if direction == "up" else index + 1
            if 0 <= target < len(ids):
                ids[index], ids[target] = ids[target], ids[index]
                reorder_tabs(client, ids)
    except ApiError as e:
        logger.error("Failed to reorder tabs: %s", e.message)
        return flash_error(request.url_for("tour_tab_list"), GENERIC_ERROR)

    return flash_redirect(request.url_for("tour_tab_list"), "จัดลำดับเรียบร้อยแล้ว")
