import pytest


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_option_known_value(client):
    payload = {
        "option_type": "call",
        "spot": 100,
        "strike": 100,
        "time_to_expiry": 1.0,
        "rate": 0.05,
        "vol": 0.20,
    }
    r = client.post("/api/v1/pricing/option", json=payload)
    assert r.status_code == 200, r.text
    data = r.json()

    # Reference value for this parameter set (Black–Scholes) ≈ 10.4506
    assert data["price"] == pytest.approx(10.4505836, abs=1e-6)
    assert data["intrinsic"] == 0.0
    assert data["time_value"] == pytest.approx(data["price"])
    for k in ["delta", "gamma", "vega", "theta", "rho"]:
        assert isinstance(data["greeks"][k], (int, float))


def test_option_at_expiry_needs_no_vol(client):
    r = client.post(
        "/api/v1/pricing/option",
        json={"option_type": "put", "spot": 90, "strike": 100, "time_to_expiry": 0},
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["price"] == 10.0
    assert data["time_value"] == 0.0
    assert data["greeks"]["delta"] == -1.0


def test_option_before_expiry_requires_vol(client):
    r = client.post(
        "/api/v1/pricing/option",
        json={"option_type": "call", "spot": 100, "strike": 100, "time_to_expiry": 0.5, "rate": 0.05},
    )
    assert r.status_code == 422


@pytest.mark.parametrize("field,value", [("spot", 0), ("strike", -1), ("vol", 0), ("time_to_expiry", -0.1)])
def test_option_rejects_contract_violations(client, field, value):
    payload = {"option_type": "call", "spot": 100, "strike": 100, "time_to_expiry": 0.5, "rate": 0.05, "vol": 0.25}
    payload[field] = value
    r = client.post("/api/v1/pricing/option", json=payload)
    assert r.status_code == 422
