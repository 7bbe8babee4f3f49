import pytest
from fastapi.testclient import TestClient
from sizefit.config import Settings, settings
from sizefit.main import create_app
from sizefit.services.storage import MemoryStorageBackend
from sizefit.services.storage_manager import StorageManager


HEADERS = {"x-api-key": settings.api_key}

ADIDAS_M = {"measurements": {"chest": 95, "waist": 80, "hips": 96}, "brand": "Adidas"}


@pytest.fixture
def client():
    storage = StorageManager(MemoryStorageBackend(), namespace="api_test_")
    return TestClient(create_app(storage=storage))


def test_recommend(client):
    r = client.post("/v1/recommend", json=ADIDAS_M, headers=HEADERS)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["recommended_size"] == "M"
    assert data["confidence"] == 95
    assert data["body_type"] == "rectangle"
    assert data["advice"] == []
    assert data["alternative_sizes"] == ["S", "L"]
    assert data["history_saved"] is None


def test_recommend_unknown_brand(client):
    r = client.post("/v1/recommend", json={**ADIDAS_M, "brand": "Gucci"}, headers=HEADERS)
    assert r.status_code == 404
    assert r.json()["detail"] == 'Brand "Gucci" not found in database'


@pytest.mark.parametrize(
    "measurements",
    [
        {"chest": 95, "waist": 80},
        {"chest": 95, "waist": 0, "hips": 96},
        {"chest": -1, "waist": 80, "hips": 96},
    ],
)
def test_recommend_rejects_bad_measurements(client, measurements):
    r = client.post("/v1/recommend", json={"measurements": measurements, "brand": "Adidas"}, headers=HEADERS)
    assert r.status_code == 422


def test_recommend_saves_history(client):
    r = client.post("/v1/recommend", json={**ADIDAS_M, "save_history": True, "product_type": "jacket"}, headers=HEADERS)
    assert r.status_code == 200
    assert r.json()["history_saved"] is True

    history = client.get("/v1/history", headers=HEADERS).json()
    assert len(history) == 1
    assert history[0]["brand"] == "Adidas"
    assert history[0]["product_type"] == "jacket"
    assert history[0]["recommended_size"] == "M"

    assert client.delete("/v1/history", headers=HEADERS).json()["success"] is True
    assert client.get("/v1/history", headers=HEADERS).json() == []


def test_brands(client):
    names = client.get("/v1/brands", headers=HEADERS).json()
    assert names[:2] == ["Nike", "Adidas"]

    zara = client.get("/v1/brands/Zara", headers=HEADERS).json()
    assert zara["fit_style"] == "very_slim"
    assert zara["size_adjustment"] == 2
    assert zara["size_chart"]["M"]["chest"] == [87.0, 92.0]

    assert client.get("/v1/brands/Gucci", headers=HEADERS).status_code == 404


def test_profile_flow(client):
    assert client.get("/v1/profile", headers=HEADERS).status_code == 404
    assert client.put("/v1/profile", json={"name": "Sam", "email": "sam@example.com"}, headers=HEADERS).status_code == 200
    assert client.patch("/v1/profile", json={"email": "new@example.com"}, headers=HEADERS).status_code == 200
    profile = client.get("/v1/profile", headers=HEADERS).json()
    assert profile["name"] == "Sam"
    assert profile["email"] == "new@example.com"


def test_measurements_flow(client):
    client.put("/v1/measurements", json={"chest": 95, "waist": 80, "hips": 96}, headers=HEADERS)
    r = client.patch("/v1/measurements/waist", json={"value": 82}, headers=HEADERS)
    assert r.status_code == 200
    assert client.get("/v1/measurements", headers=HEADERS).json()["waist"] == 82
    assert client.patch("/v1/measurements/neck", json={"value": 40}, headers=HEADERS).status_code == 400


def test_favorites_flow(client):
    client.post("/v1/favorites", json={"id": "f1", "brand": "Nike", "size": "M"}, headers=HEADERS)
    assert [f["id"] for f in client.get("/v1/favorites", headers=HEADERS).json()] == ["f1"]
    client.delete("/v1/favorites/f1", headers=HEADERS)
    assert client.get("/v1/favorites", headers=HEADERS).json() == []


def test_subscription(client):
    assert client.get("/v1/subscription", headers=HEADERS).json()["is_premium"] is False
    client.put("/v1/subscription", json={"plan": "pro"}, headers=HEADERS)
    assert client.get("/v1/subscription", headers=HEADERS).json()["is_premium"] is True
    assert client.put("/v1/subscription", json={"plan": "gold"}, headers=HEADERS).status_code == 422


def test_scans(client):
    assert client.put("/v1/scans/front", json={"image_data": "abc"}, headers=HEADERS).status_code == 200
    assert client.put("/v1/scans/top", json={"image_data": "abc"}, headers=HEADERS).status_code == 400
    scans = client.get("/v1/scans", headers=HEADERS).json()
    assert scans["front"]["image_data"] == "abc"
    assert scans["back"] is None


def test_export_import_clear(client):
    client.put("/v1/profile", json={"name": "Sam"}, headers=HEADERS)
    exported = client.get("/v1/data/export", headers=HEADERS).json()
    assert exported["profile"]["name"] == "Sam"

    assert client.delete("/v1/data", headers=HEADERS).json()["success"] is True
    assert client.get("/v1/profile", headers=HEADERS).status_code == 404

    assert client.post("/v1/data/import", json=exported, headers=HEADERS).json()["success"] is True
    assert client.get("/v1/profile", headers=HEADERS).json()["name"] == "Sam"
    assert client.get("/v1/data/info", headers=HEADERS).json()["total_items"] == 9


def test_rate_limit():
    cfg = Settings(rate_limit_per_min=1, rate_limit_burst=2)
    client = TestClient(create_app(cfg=cfg, storage=StorageManager(MemoryStorageBackend())))
    assert client.get("/v1/health").status_code == 200
    assert client.get("/v1/health").status_code == 200
    assert client.get("/v1/health").status_code == 429


def test_alternate_brand_table(tmp_path):
    path = tmp_path / "brands.json"
    path.write_text('{"Acme": {"fit_style": "slim", "size_chart": {"XS": {"chest": [80, 86], "waist": [66, 72], "hips": [80, 86]}}}}')
    cfg = Settings(brand_data_path=str(path))
    client = TestClient(create_app(cfg=cfg, storage=StorageManager(MemoryStorageBackend())))
    assert client.get("/v1/brands", headers=HEADERS).json() == ["Acme"]
    r = client.post("/v1/recommend", json={"measurements": {"chest": 83, "waist": 69, "hips": 83}, "brand": "Acme"}, headers=HEADERS)
    assert r.json()["recommended_size"] == "XS"
    assert r.json()["alternative_sizes"] == ["S"]


@pytest.mark.parametrize("payload", [{"history": 5}, {"profile": "Sam"}])
def test_import_malformed_payload(client, payload):
    r = client.post("/v1/data/import", json=payload, headers=HEADERS)
    assert r.status_code == 400
    assert "must be" in r.json()["detail"]


@pytest.mark.parametrize("literal", ["Infinity", "NaN"])
def test_recommend_rejects_non_finite_json(client, literal):
    body = '{"measurements": {"chest": %s, "waist": 80, "hips": 96}, "brand": "Adidas"}' % literal
    r = client.post("/v1/recommend", content=body, headers={**HEADERS, "content-type": "application/json"})
    assert r.status_code == 422
