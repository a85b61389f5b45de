"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finsight import __version__
from finsight.api import search, stocks
from finsight.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Finsight API",
    description="Fundamentals scorecard and DCF valuation from Finnhub, Yahoo Finance and SEC EDGAR data",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(stocks.router, prefix="/api/stocks", tags=["stocks"])
app.include_router(search.router, prefix="/api/search", tags=["search"])


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "app": "finsight"}


@app.get("/health")
def health():
    """Health check for load balancers."""
    return {"status": "healthy", "mock_data": settings.use_mock_data}


def run():
    """Run the API with uvicorn (local development)."""
    import uvicorn

    uvicorn.run(
        "finsight.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
