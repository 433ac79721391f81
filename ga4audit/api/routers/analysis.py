import logging
from typing import Callable, Optional

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ga4audit.exceptions import HttpFetchError, InvalidInputError, UpstreamApiError

logger = logging.getLogger(__name__)

CRAWL_MODE_SINGLE = "single"
CRAWL_MODE_SITEWIDE = "sitewide"


class AnalyzeWebsiteRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: Optional[str] = None
    crawl_mode: Optional[str] = None
    max_pages: Optional[int] = None


def create_analysis_router(page_analyzer_factory: Callable, crawl_executor_factory: Callable) -> APIRouter:
    router = APIRouter(tags=["Analysis"])

    @router.options("/analyze-website")
    def analyze_website_options():
        return Response(status_code=200)

    @router.post("/analyze-website")
    def analyze_website(req: AnalyzeWebsiteRequest):
        if not req.url or not req.url.strip():
            raise HTTPException(status_code=400, detail="URL is required")
        mode = (req.crawl_mode or CRAWL_MODE_SINGLE).strip().lower()
        if mode not in (CRAWL_MODE_SINGLE, CRAWL_MODE_SITEWIDE):
            raise HTTPException(status_code=400, detail=f"Unknown crawlMode: {req.crawl_mode!r}")

        try:
            if mode == CRAWL_MODE_SITEWIDE:
                return crawl_executor_factory().crawl(req.url, req.max_pages).to_dict()
            return page_analyzer_factory().analyze(req.url)
        except InvalidInputError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except UpstreamApiError as e:
            raise HTTPException(status_code=e.status_code, detail={"error": str(e), "details": e.body})
        except HttpFetchError as e:
            logger.warning("Analysis fetch failed: %s", e)
            raise HTTPException(status_code=500, detail="Failed to analyze website")
        except Exception:
            logger.exception("Unexpected error analyzing %s", req.url)
            raise HTTPException(status_code=500, detail="Failed to analyze website")

    return router
