"""News proxy service: forwards feed requests to NewsAPI with the server-held key."""

import logging
import os

import httpx
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from news_ai.config.models import NewsAPISourceConfig
from news_ai.gateway.newsapi import NEWSAPI_URL

logger = logging.getLogger(__name__)

app = FastAPI(title="News AI Proxy")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def upstream_url() -> str:
    """NewsAPI endpoint (override via NEWSAPI_URL for testing)."""
    return os.getenv("NEWSAPI_URL", NEWSAPI_URL)


def upstream_timeout() -> float:
    """Upstream timeout in seconds (NEWSAPI_TIMEOUT, defaulting to the source config)."""
    return float(os.getenv("NEWSAPI_TIMEOUT", NewsAPISourceConfig().timeout))


@app.get("/api/news")
async def news(
    topic: str = "general",
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=9, ge=1, alias="pageSize"),
) -> JSONResponse:
    """Relay one page of NewsAPI results for a topic."""
    api_key = os.getenv("NEWSAPI_KEY")
    if not api_key:
        return JSONResponse(status_code=500, content={"error": "Server is missing NEWSAPI_KEY."})

    params: dict[str, str | int] = {
        "apiKey": api_key,
        "q": topic,
        "page": page,
        "pageSize": page_size,
        "language": "en",
        "sortBy": "publishedAt",
    }

    try:
        async with httpx.AsyncClient(timeout=upstream_timeout()) as client:
            upstream = await client.get(upstream_url(), params=params)
        data = upstream.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("News proxy upstream call failed: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Unexpected server error", "details": str(exc)},
        )

    if upstream.is_success:
        return JSONResponse(status_code=200, content=data)

    body = data if isinstance(data, dict) else {}
    return JSONResponse(
        status_code=502,
        content={
            "status": body.get("status") or "error",
            "message": body.get("message") or "News API error",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "news_ai.proxy:app",
        host=os.getenv("PROXY_HOST", "127.0.0.1"),
        port=int(os.getenv("PROXY_PORT", "8000")),
    )
