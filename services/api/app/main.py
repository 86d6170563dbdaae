from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import json
import logging
from typing import Any, Dict, List, Optional

from .config import settings
from .errors import AppError, ExtractionError
from .extractors import fetch_and_parse_article
from .feeds import fetch_feed_by_id, fetch_rss_feed
from .models import Article, Feed, FeedSummary
from .sources import list_feeds
from .auth_api import router as auth_router
from .saved_api import router as saved_router


def _setup_logging() -> None:
    level = (settings.log_level or "INFO").upper().strip() or "INFO"
    logging.basicConfig(level=level, format="%(asctime)s [%(name)s] %(levelname)s %(message)s")

    if settings.log_json:
        class JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload: Dict[str, Any] = {
                    "level": record.levelname,
                    "logger": record.name,
                    "msg": record.getMessage(),
                }
                if record.exc_info:
                    payload["exc"] = self.formatException(record.exc_info)
                return json.dumps(payload, ensure_ascii=False)

        for h in logging.getLogger().handlers:
            h.setFormatter(JsonFormatter())

    # Quiet noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


_setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Ententi Reading API", version="1.0.0")
app.include_router(auth_router)
app.include_router(saved_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Feed-Errors"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        # detail stays server-side; the client gets the generic message
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details: List[Dict[str, str]] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:] or loc
        details.append({"field": ".".join(loc) or "body", "message": str(err.get("msg") or "Invalid value")})
    if not details:
        details.append({"field": "body", "message": "Invalid request"})
    return JSONResponse(status_code=400, content={"error": details[0]["message"], "details": details})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s unhandled error", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/api/feeds", response_model=List[FeedSummary])
def feeds():
    """Registered sources, in display order."""
    return [cfg.summary() for cfg in list_feeds()]


@app.get("/api/feed", response_model=List[Feed])
def feed_all():
    """All sources, best effort.

    Successful feeds come back in registry order; ids of sources that failed
    are listed in the ``X-Feed-Errors`` header. Scraped sources degrade to an
    empty feed, so even with every RSS source down this is a 200.
    """
    results = fetch_rss_feed()
    body = [r.feed for r in results if r.ok]
    failed = [r.feed_id for r in results if not r.ok]
    headers = {"X-Feed-Errors": ",".join(failed)} if failed else None
    return JSONResponse(content=jsonable_encoder(body, by_alias=True), headers=headers)


@app.get("/api/feed/{feed_id}", response_model=Feed)
def feed_one(feed_id: str):
    return fetch_feed_by_id(feed_id)


@app.get("/api/article", response_model=Article, response_model_exclude_none=True)
def article(url: Optional[str] = Query(None)):
    parsed = fetch_and_parse_article(url)
    if parsed is None:
        raise ExtractionError(f"no article extracted from {url}")
    return parsed
