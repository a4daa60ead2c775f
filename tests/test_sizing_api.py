from fastapi.testclient import TestClient
from app.config import settings
from app.main import app


client = TestClient(app)
HEADERS = {"X-API-Key": settings.api_key}


def _post(path, payload):
    return client.post(f"/v1/sizing{path}", json=payload, headers=HEADERS)


def test_schema_from_category_and_gender():
    r = _post("/schema", {"category": "shirt", "gender": "men"})
    assert r.status_code == 200
    body = r.json()
    assert body["system"] == "shirt_collar_eu"
    assert body["required"] == ["height_cm", "weight_kg", "shirt_size_eu"]
    assert body["available"] is None


def test_schema_from_product(make_product):
    product = make_product("Selvedge jeans", ["W30", "W32", "W34"])
    r = _post("/schema", {"product": product})
    body = r.json()
    assert body["system"] == "waist_inch"
    assert body["available"]["waist"] == [30, 32, 34]


def test_parse_with_schema_round_trip():
    schema = _post("/schema", {"category": "shirt", "gender": "male"}).json()
    r = _post("/parse", {"text": "182 41", "schema": schema})
    assert r.status_code == 200
    body = r.json()
    assert body["height_cm"] == 182
    assert body["shirt_size_eu"] == 41


def test_parse_without_schema():
    body = _post("/parse", {"text": "178cm 75kg EU 48"}).json()
    assert (body["height_cm"], body["weight_kg"], body["usual_size_eu"]) == (178, 75, 48)


def test_missing_and_issues():
    schema = _post("/schema", {"category": "jacket", "gender": "male"}).json()
    body = _post("/missing", {"schema": schema, "user": {"height_cm": 140}}).json()
    assert body["missing"] == ["weight_kg", "usual_size_eu"]
    assert body["issues"] == ["height_cm"]
    assert body["prompt_key"] == "usual_size_eu"


def test_recommend_for_product(make_product):
    product = make_product("Field jacket", ["44", "46", "48", "52"], tags=["menswear"])
    r = _post("/recommend", {"product": product, "user": {"usual_size_eu": 50, "height_cm": 178}})
    assert r.status_code == 200
    body = r.json()
    assert body["system"] == "eu_numeric"
    assert body["size_eu"] == 48
    assert body["used_usual_as_anchor"] is True
    assert body["length"] == "standard"


def test_recommend_without_user_returns_null():
    r = _post("/recommend", {"product": {"title": "Oxford shirt"}})
    assert r.status_code == 200
    assert r.json() is None


def test_recommend_rejects_non_object_body():
    r = client.post("/v1/sizing/recommend", json=["not", "an", "object"], headers=HEADERS)
    assert r.status_code == 422


def test_recommend_with_oversized_number_still_answers():
    r = _post("/recommend", {"user": {"height_cm": 10**400, "usual_size_eu": 48}, "gender": "male"})
    assert r.status_code == 200
    assert r.json()["size_eu"] == 48
