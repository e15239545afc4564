"""
faxbridge API
FastAPI application that triggers fax intake runs on demand.
"""

import logging

from fastapi import FastAPI

from faxbridge.routers import runs

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="faxbridge API",
    description="Prior-authorization fax metadata extraction and bulk upload",
    version="0.1.0",
)

app.include_router(runs.router, prefix="/api", tags=["runs"])


@app.get("/")
async def root():
    return {"message": "faxbridge API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}
