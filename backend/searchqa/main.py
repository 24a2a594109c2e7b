import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from searchqa.core.config import get_settings
from searchqa.routers import messages, models, query, sources


settings = get_settings()

root = logging.getLogger()
if not root.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown: release pooled database connections
    from searchqa.core.database import engine
    await engine.dispose()


app = FastAPI(
    title="SearchQA API",
    description="Retrieval-augmented question answering with streamed, pollable progress",
    version="1.0.0",
    lifespan=lifespan,
)
# Avoid 307 redirects for trailing slash (e.g. /messages/ -> /messages)
app.router.redirect_slashes = False

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(query.router, prefix="/backend", tags=["Query"])
app.include_router(messages.router, prefix="/messages", tags=["Messages"])
app.include_router(sources.router, prefix="/sources", tags=["Sources"])
app.include_router(models.router, prefix="/models", tags=["Models"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
