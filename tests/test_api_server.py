import io

import pytest

import api_server
from sticker_slicer.services.image_service import ImageService
from conftest import make_uniform_grid

image_service = ImageService()


@pytest.fixture
def client():
    api_server.app.config["TESTING"] = True
    with api_server.app.test_client() as c:
        yield c


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "healthy"


def test_layouts(client):
    data = client.get("/api/layouts").get_json()
    assert data["8"] == {"width": 1480, "height": 640, "rows": 2, "cols": 4}
    assert set(data) == {"8", "16", "24", "32", "40"}


def test_slice_grid_from_data_url(client):
    sheet = make_uniform_grid(2, 4)
    resp = client.post("/api/slice-grid", json={
        "image": image_service.to_data_url(sheet),
        "rows": 2,
        "cols": 4,
        "width": 64,
        "height": 64,
        "icons": True,
    })

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["count"] == 8
    first = image_service.from_data_url(body["stickers"][0])
    assert first.pixels.shape == (64, 64, 4)
    assert set(body["icons"]) == {"main_icon", "tab_icon"}


def test_slice_grid_from_upload(client):
    png = image_service.encode_png(make_uniform_grid(2, 4))
    resp = client.post(
        "/api/slice-grid",
        data={"sheet": (io.BytesIO(png), "sheet.png"), "quantity": "8"},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert resp.get_json()["count"] == 8


def test_cleanup_endpoint(client, enclosed_green):
    resp = client.post("/api/cleanup", json={
        "image": image_service.to_data_url(enclosed_green),
        "color": "#00FF00",
        "tolerance": 20,
        "erosion": 0,
    })
    assert resp.status_code == 200
    cleaned = image_service.from_data_url(resp.get_json()["image"])
    assert cleaned.alpha[0, 0] == 0
    assert cleaned.alpha[200, 200] == 255


@pytest.mark.parametrize("payload", [
    {},
    {"image": "data:image/png;base64,bm90IGFuIGltYWdl"},
    {"image": "data:image/png;base64,@@@"},
])
def test_bad_images_are_rejected(client, payload):
    resp = client.post("/api/cleanup", json=payload)
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_bad_color_is_rejected(client, enclosed_green):
    resp = client.post("/api/cleanup", json={
        "image": image_service.to_data_url(enclosed_green),
        "color": "not-a-color",
    })
    assert resp.status_code == 400


def test_missing_grid_is_rejected(client):
    resp = client.post("/api/slice-grid", json={
        "image": image_service.to_data_url(make_uniform_grid(1, 2)),
    })
    assert resp.status_code == 400
