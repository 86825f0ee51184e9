from urllib.parse import unquote

from conftest import festival, tour


def flash(response, category="success"):
    value = response.cookies.get(f"flash_{category}")
    return unquote(value) if value else None


def festival_form(**fields):
    data = {
        "name": "สงกรานต์",
        "start_date": "2026-04-13",
        "end_date": "2026-04-15",
        "badge_text": "สงกรานต์",
        "badge_color": "blue",
        "display_modes": ["card", "period"],
        "is_active": "1",
        "sort_order": "0",
    }
    data.update(fields)
    return data


def test_list_page_shows_upload_controls_for_saved_festivals(logged_in, backend):
    backend.on("GET", "/festival-holidays", {"data": [festival(1)]})
    backend.on("GET", "/festival-page-settings", {"data": {"cover_image_url": None}})

    response = logged_in.get("/festivals")
    assert response.status_code == 200
    assert "สงกรานต์" in response.text
    assert "13 เม.ย. 2569" in response.text
    assert "/festivals/1/images/image" in response.text
    assert "/festivals/page-settings/cover-image" in response.text


def test_create_festival(logged_in, backend):
    backend.on("POST", "/festival-holidays", {"data": festival(5)})

    response = logged_in.post("/festivals/create", data=festival_form())
    assert response.status_code == 303
    assert flash(response) == "บันทึกเทศกาลเรียบร้อยแล้ว"

    sent = backend.last("POST", "/festival-holidays").json
    assert sent["start_date"] == "2026-04-13"
    assert sent["end_date"] == "2026-04-15"
    assert sent["display_modes"] == ["card", "period"]


def test_create_rejects_reversed_dates_before_any_request(logged_in, backend):
    response = logged_in.post("/festivals/create", data=festival_form(start_date="2026-04-15", end_date="2026-04-13"))
    assert response.status_code == 400
    assert "วันเริ่มต้นต้องไม่อยู่หลังวันสิ้นสุด" in response.text
    assert backend.calls == []


def test_create_requires_name_and_dates(logged_in, backend):
    response = logged_in.post("/festivals/create", data=festival_form(name=" ", end_date=""))
    assert response.status_code == 400
    assert backend.calls == []


def test_new_festival_form_has_no_upload_controls(logged_in):
    response = logged_in.get("/festivals/create")
    assert response.status_code == 200
    assert 'type="file"' not in response.text


def test_edit_festival(logged_in, backend):
    backend.on("GET", "/festival-holidays/1", {"data": festival(1)})
    backend.on("PUT", "/festival-holidays/1", {"data": festival(1)})

    page = logged_in.get("/festivals/1/edit")
    assert page.status_code == 200
    assert 'value="2026-04-13"' in page.text

    response = logged_in.post("/festivals/1/edit", data=festival_form(badge_color="gold"))
    assert response.status_code == 303
    assert backend.last("PUT", "/festival-holidays/1").json["badge_color"] is None


def test_preview_shows_total_apart_from_sample(logged_in, backend):
    backend.on("GET", "/festival-holidays/1", {"data": festival(1)})
    backend.on("POST", "/festival-holidays/1/preview-tours", {
        "data": {"total_count": 27, "preview_tours": [tour(1), tour(2), tour(3)]},
    })

    response = logged_in.get("/festivals/1/preview")
    assert response.status_code == 200
    assert backend.calls_to("POST", "/festival-holidays/1/preview-tours")
    assert "27 ทัวร์" in response.text
    assert "+24 อื่นๆ" in response.text


def test_preview_without_tours(logged_in, backend):
    backend.on("GET", "/festival-holidays/1", {"data": festival(1)})
    backend.on("POST", "/festival-holidays/1/preview-tours", {"data": {"total_count": 0, "preview_tours": []}})

    response = logged_in.get("/festivals/1/preview")
    assert "ไม่พบทัวร์ที่มีรอบเดินทางในช่วงนี้" in response.text


def test_preview_with_malformed_tour_redirects(logged_in, backend):
    backend.on("GET", "/festival-holidays/1", {"data": festival(1)})
    backend.on("POST", "/festival-holidays/1/preview-tours", {
        "data": {"total_count": 1, "preview_tours": [tour(1, title=None)]},
    })

    response = logged_in.get("/festivals/1/preview")
    assert response.status_code == 303
    assert response.headers["location"].endswith("/festivals")
    assert flash(response, "error") == "เกิดข้อผิดพลาดในการดึงตัวอย่าง"


def test_upload_card_image(logged_in, backend):
    backend.on("POST", "/festival-holidays/1/image", {"data": festival(1, image_url="https://cdn.test/a.jpg")})

    response = logged_in.post(
        "/festivals/1/images/image",
        files={"image": ("a.jpg", b"\xff\xd8jpeg", "image/jpeg")},
    )
    assert response.status_code == 303
    assert flash(response) == "อัปโหลดรูปภาพเรียบร้อยแล้ว"
    assert backend.last("POST", "/festival-holidays/1/image").files["image"][0] == "a.jpg"


def test_upload_rejects_non_images(logged_in, backend):
    response = logged_in.post(
        "/festivals/1/images/cover_image",
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 303
    assert flash(response, "error") == "กรุณาเลือกไฟล์รูปภาพ"
    assert backend.calls == []


def test_unknown_image_slot(logged_in, backend):
    response = logged_in.post("/festivals/1/images/banner/delete")
    assert flash(response, "error") == "ไม่รู้จักประเภทรูปภาพ"
    assert backend.calls == []


def test_delete_cover_image_and_position(logged_in, backend):
    backend.on("DELETE", "/festival-holidays/1/cover-image", {"success": True})
    backend.on("PUT", "/festival-holidays/1", {"data": festival(1)})

    response = logged_in.post("/festivals/1/images/cover_image/delete")
    assert flash(response) == "ลบรูปปกเรียบร้อยแล้ว"

    logged_in.post("/festivals/1/cover-position", data={"position": "left top"})
    assert backend.last("PUT", "/festival-holidays/1").json == {"cover_image_position": "left top"}


def test_page_cover_settings(logged_in, backend):
    backend.on("POST", "/festival-page-settings/cover-image", {"data": {"cover_image_url": "https://cdn.test/p.jpg"}})
    backend.on("PUT", "/festival-page-settings", {"data": {"cover_image_position": "bottom"}})
    backend.on("DELETE", "/festival-page-settings/cover-image", {"success": True})

    upload = logged_in.post(
        "/festivals/page-settings/cover-image",
        files={"cover_image": ("p.png", b"png", "image/png")},
    )
    assert upload.status_code == 303
    assert flash(upload) == "อัปโหลดภาพ Cover หลักเรียบร้อยแล้ว"

    logged_in.post("/festivals/page-settings/cover-position", data={"position": "bottom"})
    assert backend.last("PUT", "/festival-page-settings").json == {"cover_image_position": "bottom"}

    delete = logged_in.post("/festivals/page-settings/cover-image/delete")
    assert flash(delete) == "ลบภาพ Cover หลักเรียบร้อยแล้ว"


def test_toggle_and_delete(logged_in, backend):
    backend.on("PATCH", "/festival-holidays/1/toggle-status", {"success": True})
    backend.on("DELETE", "/festival-holidays/1", {"success": True})

    assert flash(logged_in.post("/festivals/1/toggle")) == "เปลี่ยนสถานะเรียบร้อยแล้ว"
    assert flash(logged_in.post("/festivals/1/delete")) == "ลบเทศกาลเรียบร้อยแล้ว"


def test_delete_failure_is_reported(logged_in, backend):
    backend.on("DELETE", "/festival-holidays/1", {"message": "boom"}, status=500)
    response = logged_in.post("/festivals/1/delete")
    assert flash(response, "error") == "เกิดข้อผิดพลาดในการลบ"
