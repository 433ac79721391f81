from ga4audit.api.routers.systems import create_systems_router


def _endpoint(router, path):
    for route in router.routes:
        if getattr(route, "path", None) == path:
            return route.endpoint
    raise AssertionError(f"No route found for {path}")


def test_health():
    router = create_systems_router({})
    assert _endpoint(router, "/systems/health")() == {"status": "ok"}


def test_config_masks_secrets():
    router = create_systems_router({
        "USER_AGENT": "GA4Audit/0.1",
        "RENDER_API_KEY": "sekrit",
        "GA4AUDIT_CRAWL_PROFILE": None,
        "PORT": 8000,
    })
    env = _endpoint(router, "/systems/config")()["environment"]
    assert env["RENDER_API_KEY"] == "***"
    assert env["USER_AGENT"] == "GA4Audit/0.1"
    assert env["GA4AUDIT_CRAWL_PROFILE"] is None
    assert env["PORT"] == "8000"
