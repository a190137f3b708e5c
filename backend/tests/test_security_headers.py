from conftest import auth_headers


def test_api_responses_are_not_cached(client, student):
    res = client.get("/api/notifications/", headers=auth_headers(student))
    assert res.status_code == 200
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "DENY"
    assert res.headers["Cache-Control"] == "no-store"


def test_error_responses_carry_headers(client):
    res = client.get("/api/requests/")
    assert res.status_code == 401
    assert res.headers["X-Content-Type-Options"] == "nosniff"


def test_health_is_cacheable(client):
    res = client.get("/healthz")
    assert res.json() == {"status": "ok"}
    assert "Cache-Control" not in res.headers
    assert res.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


def test_cors_preflight_allows_frontend(client):
    res = client.options(
        "/api/requests/",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "http://localhost:3000"
