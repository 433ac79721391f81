import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ga4audit.api.routers import create_analysis_router, create_audit_router, create_systems_router

logger = logging.getLogger(__name__)


def _error_body(detail) -> dict:
    if isinstance(detail, dict) and "error" in detail:
        body = {"error": detail["error"]}
        if detail.get("details") is not None:
            body["details"] = detail["details"]
        return body
    return {"error": str(detail)}


async def http_error_handler(request, exc: StarletteHTTPException):
    detail = exc.detail
    if exc.status_code == 405:
        detail = "Method not allowed"
    return JSONResponse(_error_body(detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_error_handler(request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse({"error": "Invalid request body", "details": details}, status_code=400)


async def unhandled_error_handler(request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app(container) -> FastAPI:
    """Build the FastAPI app wired to the services in `container`."""
    app = FastAPI(title="GA4 Audit")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(create_analysis_router(container.page_analyzer, container.crawl_executor))
    app.include_router(create_audit_router(container.ga4_audit_service))
    app.include_router(create_systems_router(container.config()))
    return app
