import pytest

from conftest import API_TOKEN, CONDITION_OPTIONS, festival, tab, tour
from tourtabs.schemas.festival import FestivalDraft
from tourtabs.schemas.tour_tab import TabDraft
from tourtabs.services.api_client import (
    ApiError,
    NetworkError,
    NotFound,
    Unauthorized,
    ValidationFailed,
    unwrap,
)
from tourtabs.services.festivals import (
    AssetAttachError,
    create_festival,
    delete_festival_image,
    get_page_setting,
    list_festivals,
    set_festival_cover_position,
    upload_festival_image,
    upload_page_cover,
)
from tourtabs.services.preview import preview_draft, preview_festival, preview_tab
from tourtabs.services.tour_tabs import (
    create_tab,
    get_condition_options,
    list_tabs,
    reorder_tabs,
    search_tabs,
    sort_tabs,
)


def test_requests_carry_bearer_token(api, backend):
    backend.on("GET", "/tour-tabs", {"data": [tab(1)]})
    list_tabs(api)
    call = backend.last("GET", "/tour-tabs")
    assert call.headers["Authorization"] == f"Bearer {API_TOKEN}"
    assert call.headers["Accept"] == "application/json"


def test_unauthorized_is_not_an_api_error(api, backend):
    backend.on("GET", "/tour-tabs", {"message": "Unauthenticated."}, status=401)
    with pytest.raises(Unauthorized) as e:
        list_tabs(api)
    assert not isinstance(e.value, ApiError)
    assert e.value.status_code == 401


def test_validation_errors_are_kept_per_field(api, backend):
    backend.on("POST", "/tour-tabs", {
        "message": "The given data was invalid.",
        "errors": {"slug": ["The slug has already been taken."], "name": "required"},
    }, status=422)
    with pytest.raises(ValidationFailed) as e:
        create_tab(api, TabDraft(name="x"))
    assert e.value.first_errors() == {"slug": "The slug has already been taken.", "name": "required"}
    assert e.value.flat_message() == "The slug has already been taken., required"


def test_not_found_and_server_errors(api, backend):
    with pytest.raises(NotFound):
        api.get("/tour-tabs/99")

    backend.on("GET", "/tour-tabs/1", "<html>oops</html>", status=500)
    with pytest.raises(ApiError) as e:
        api.get("/tour-tabs/1")
    assert e.value.message == "HTTP Error: 500"


def test_network_failure(api, backend, network_down):
    backend.fail("GET", "/tour-tabs", network_down)
    with pytest.raises(NetworkError):
        list_tabs(api)


def test_non_json_success_body(api, backend):
    backend.on("GET", "/tour-tabs", "<html></html>")
    with pytest.raises(NetworkError):
        api.get("/tour-tabs")


def test_success_false_envelope(api, backend):
    backend.on("POST", "/tour-tabs/reorder", {"success": False, "message": "ลำดับไม่ถูกต้อง"})
    with pytest.raises(ApiError) as e:
        reorder_tabs(api, [3, 1])
    assert e.value.message == "ลำดับไม่ถูกต้อง"


def test_unwrap():
    assert unwrap({"data": [1]}) == [1]
    assert unwrap([1]) == [1]
    assert unwrap({"id": 1}) == {"id": 1}


# -------------------------------------------------
# tour tab services
# -------------------------------------------------
def test_list_tabs_filters_by_status(api, backend):
    backend.on("GET", "/tour-tabs", {"data": []})
    list_tabs(api, is_active="1")
    assert backend.last("GET", "/tour-tabs").params == {"is_active": "1"}


def test_create_tab_sends_normalized_payload(api, backend):
    backend.on("POST", "/tour-tabs", {"success": True, "data": tab(5)})
    created = create_tab(api, TabDraft(name="ทัวร์ยอดนิยม", badge_text="  "))
    assert created.id == 5

    sent = backend.last("POST", "/tour-tabs").json
    assert sent["name"] == "ทัวร์ยอดนิยม"
    assert sent["badge_text"] is None
    assert sent["conditions"] == []
    assert sent["display_limit"] == 12
    assert sent["sort_by"] == "popular"


def test_reorder_sends_positions(api, backend):
    backend.on("POST", "/tour-tabs/reorder", {"success": True})
    reorder_tabs(api, [3, 1, 2])
    assert backend.last("POST", "/tour-tabs/reorder").json == {"items": [
        {"id": 3, "sort_order": 0},
        {"id": 1, "sort_order": 1},
        {"id": 2, "sort_order": 2},
    ]}


def test_condition_options(api, backend):
    backend.on("GET", "/tour-tabs/condition-options", {"data": CONDITION_OPTIONS})
    options = get_condition_options(api)
    assert [c.id for c in options.countries] == [392, 764]
    assert options.condition_types == {}


def test_sort_and_search_tabs(api, backend):
    backend.on("GET", "/tour-tabs", {"data": [
        tab(1, name="Europe", sort_order=0, is_active=False),
        tab(2, name="Japan", slug="japan", sort_order=2),
        tab(3, name="Promo", description="japan deals", sort_order=1),
    ]})
    tabs = sort_tabs(list_tabs(api))
    assert [t.id for t in tabs] == [3, 2, 1]
    assert [t.id for t in search_tabs(tabs, " JAPAN ")] == [3, 2]


# -------------------------------------------------
# previews
# -------------------------------------------------
def test_preview_saved_tab(api, backend):
    backend.on("GET", "/tour-tabs/1/preview", {"data": {"tours": [tour(1), tour(2)], "total": 2}})
    preview = preview_tab(api, 1, limit=12)
    assert backend.last("GET", "/tour-tabs/1/preview").params == {"limit": 12}
    assert [t.id for t in preview.tours] == [1, 2]


def test_malformed_preview_is_a_network_error(api, backend):
    backend.on("GET", "/tour-tabs/1/preview", {"data": {"tours": [tour(1, title=None)]}})
    backend.on("POST", "/festival-holidays/1/preview-tours", {"data": {"preview_tours": [{"id": 1}]}})

    with pytest.raises(NetworkError) as exc:
        preview_tab(api, 1)
    assert exc.value.message == "Invalid response from server"
    with pytest.raises(NetworkError):
        preview_festival(api, 1)


def test_preview_draft_conditions(api, backend):
    backend.on("POST", "/tour-tabs/preview-conditions", {"data": {"tours": []}})
    draft = TabDraft(name="x", conditions=[{"type": "has_discount", "value": True}], sort_by="price_asc")
    assert preview_draft(api, draft).is_empty
    assert backend.last("POST", "/tour-tabs/preview-conditions").json == {
        "conditions": [{"type": "has_discount", "value": True}],
        "sort_by": "price_asc",
        "display_limit": 12,
    }


def test_preview_festival_by_id(api, backend):
    backend.on("POST", "/festival-holidays/4/preview-tours", {
        "success": True,
        "data": {"total_count": 40, "preview_tours": [tour(1), tour(2)]},
    })
    preview = preview_festival(api, 4)
    assert backend.calls_to("POST", "/festival-holidays/4/preview-tours")
    assert preview.total_count == 40
    assert len(preview.preview_tours) == 2


# -------------------------------------------------
# festival services
# -------------------------------------------------
def test_festivals_are_listed_by_sort_order_then_date(api, backend):
    backend.on("GET", "/festival-holidays", {"data": [
        festival(1, sort_order=1, start_date="2026-01-01", end_date="2026-01-01"),
        festival(2, sort_order=0, start_date="2026-12-31", end_date="2026-12-31"),
        festival(3, sort_order=0, start_date="2026-04-13", end_date="2026-04-15"),
    ]})
    assert [f.id for f in list_festivals(api)] == [3, 2, 1]


def test_create_festival(api, backend):
    backend.on("POST", "/festival-holidays", {"data": festival(9)})
    draft = FestivalDraft(name="สงกรานต์", start_date="2026-04-13", end_date="2026-04-15",
                          display_modes=["period", "card"])
    assert create_festival(api, draft).id == 9
    sent = backend.last("POST", "/festival-holidays").json
    assert sent["start_date"] == "2026-04-13"
    assert sent["display_modes"] == ["card", "period"]


def test_image_actions_need_a_saved_festival(api, backend):
    with pytest.raises(AssetAttachError):
        upload_festival_image(api, None, "image", "a.jpg", b"...", "image/jpeg")
    with pytest.raises(AssetAttachError):
        delete_festival_image(api, None, "cover_image")
    with pytest.raises(AssetAttachError):
        set_festival_cover_position(api, None, "top")
    assert backend.calls == []


def test_upload_festival_images(api, backend):
    backend.on("POST", "/festival-holidays/3/cover-image", {"data": festival(3, cover_image_url="https://cdn.test/c.jpg")})
    updated = upload_festival_image(api, 3, "cover_image", "c.jpg", b"jpeg", "image/jpeg")
    assert updated.cover_image_url == "https://cdn.test/c.jpg"
    assert backend.last("POST", "/festival-holidays/3/cover-image").files == {
        "cover_image": ("c.jpg", b"jpeg", "image/jpeg"),
    }

    backend.on("DELETE", "/festival-holidays/3/image", {"success": True})
    delete_festival_image(api, 3, "image")
    assert backend.calls_to("DELETE", "/festival-holidays/3/image")


def test_cover_position_falls_back_to_center(api, backend):
    backend.on("PUT", "/festival-holidays/3", {"data": festival(3)})
    set_festival_cover_position(api, 3, "somewhere")
    assert backend.last("PUT", "/festival-holidays/3").json == {"cover_image_position": "center"}


def test_page_settings(api, backend):
    backend.on("GET", "/festival-page-settings", {"data": None})
    assert get_page_setting(api).cover_image_url is None

    backend.on("POST", "/festival-page-settings/cover-image", {"data": {"cover_image_url": "https://cdn.test/p.jpg"}})
    setting = upload_page_cover(api, "p.jpg", b"png", "image/png")
    assert setting.cover_image_url == "https://cdn.test/p.jpg"
