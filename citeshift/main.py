"""FastAPI application entry point for CiteShift."""

import logging

from fastapi import FastAPI

from citeshift.config import get_settings
from citeshift.routers import citations

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="CiteShift",
    description="Reorder, navigate and annotate references inside org-mode citations",
    version="0.1.0",
)

# Include routers
app.include_router(citations.router, prefix="/api", tags=["citations"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


def run():
    """Run the application with uvicorn."""
    import uvicorn
    uvicorn.run("citeshift.main:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    run()
