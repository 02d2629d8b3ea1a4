"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import router
from ..core.registry import load_catalog, registry

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("playbook_engine")

# Create FastAPI app
app = FastAPI(
    title="Playbook Engine",
    description="Formation-aware playbook generation: concept scoring, allocation and route/block geometry",
    version="0.1.0"
)

# CORS middleware for the playbook editor
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(router)


@app.on_event("startup")
async def startup_event():
    """Startup tasks."""
    logger.info("Playbook Engine starting up...")
    load_catalog()
    logger.info(f"Catalog ready: {registry.formations.count()} formations, "
                f"{registry.concepts.count()} concepts")


@app.on_event("shutdown")
async def shutdown_event():
    """Shutdown tasks."""
    logger.info("Playbook Engine shutting down...")
