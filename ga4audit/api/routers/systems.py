from fastapi import APIRouter

SECRET_MARKERS = ("KEY", "TOKEN", "SECRET", "PASSWORD")


def _masked(key: str, value):
    if value is None:
        return None
    if any(marker in key.upper() for marker in SECRET_MARKERS):
        return "***"
    return str(value)


def create_systems_router(container_env: dict):
    """Create systems router with access to container environment config."""
    router = APIRouter(prefix="/systems", tags=["System"])

    @router.get("/health")
    def health():
        return {"status": "ok"}

    @router.get("/config")
    def get_config():
        """Return current environment configuration values, secrets masked."""
        return {
            "environment": {key: _masked(key, value) for key, value in container_env.items()}
        }

    return router
