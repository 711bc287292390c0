from fastapi.testclient import TestClient

from unitcalc.api.app import app


client = TestClient(app)


def test_evaluate_endpoint_returns_display_and_units():
    response = client.post("/v1/calc/evaluate", json={"expression": "1 kg + 12 g"})
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["result"] == "1.012 kg"
    assert data["value"] == "1.012"
    assert data["units"] == [{"name": "kg", "exponent": "1"}]


def test_evaluate_endpoint_reports_errors():
    response = client.post("/v1/calc/evaluate", json={"expression": "1 kg + 1 m"})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["kind"] == "IncompatibleUnitsError"
    assert "incompatible" in detail["message"]


def test_parse_endpoint_returns_tree():
    response = client.post("/v1/calc/parse", json={"expression": "8 1/2"})
    assert response.status_code == 200
    ast = response.json()["ast"]
    assert ast["type"] == "Add"
    assert ast["lhs"] == {"type": "Num", "value": "8", "base": 10}
    assert ast["rhs"]["type"] == "Div"


def test_parse_endpoint_rejects_bad_syntax():
    response = client.post("/v1/calc/parse", json={"expression": "(1 + 2"})
    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "ParseError"


def test_units_endpoint_lists_names():
    response = client.get("/v1/calc/units")
    assert response.status_code == 200
    units = response.json()["units"]
    assert "kg" in units
    assert "inches" in units


def test_health_echoes_request_id():
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"] == "abc-123"


def test_deeply_nested_expression_is_a_client_error():
    response = client.post("/v1/calc/evaluate", json={"expression": "(" * 150 + "1" + ")" * 150})
    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "NestingDepthError"
