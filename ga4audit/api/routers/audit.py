import logging
from typing import Callable, Optional, Union

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ga4audit.exceptions import HttpFetchError, InvalidInputError, UpstreamApiError

logger = logging.getLogger(__name__)


class GA4AuditRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    access_token: Optional[str] = None
    property_id: Optional[Union[str, int]] = None


def create_audit_router(audit_service_factory: Callable) -> APIRouter:
    router = APIRouter(tags=["GA4 Audit"])

    @router.options("/ga4-audit")
    def ga4_audit_options():
        return Response(status_code=200)

    @router.post("/ga4-audit")
    def ga4_audit(req: GA4AuditRequest):
        if not req.access_token or not req.access_token.strip():
            raise HTTPException(status_code=400, detail="Access token is required")
        try:
            return audit_service_factory().run(req.access_token, req.property_id)
        except InvalidInputError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except UpstreamApiError as e:
            raise HTTPException(status_code=e.status_code, detail={"error": str(e), "details": e.body})
        except HttpFetchError as e:
            # the message names a Google URL, never the token
            logger.warning("GA4 audit request failed: %s", e)
            raise HTTPException(status_code=500, detail="Failed to fetch GA4 data")
        except Exception:
            logger.exception("Unexpected error during GA4 audit")
            raise HTTPException(status_code=500, detail="Failed to fetch GA4 data")

    return router
