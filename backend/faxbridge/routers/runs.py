"""
Pipeline run API endpoints.
"""

import logging
import threading
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from faxbridge.config import load_config
from faxbridge.exceptions import ConfigError, ScanError
from faxbridge.models.outcome import RunReport
from faxbridge.models.profile import PROFILES, DirectionProfile, get_profile
from faxbridge.services.pipeline import run_pipeline

router = APIRouter()

logger = logging.getLogger(__name__)

# Runs share the incoming/processed/failed directories; only one at a time.
_run_lock = threading.Lock()


class RunRequest(BaseModel):
    """Request to start a pipeline run."""
    profile: str = "sent"


@router.get("/profiles", response_model=List[DirectionProfile])
def list_profiles():
    """Return every built-in direction profile."""
    return list(PROFILES.values())


@router.post("/runs", response_model=RunReport)
def start_run(request: RunRequest):
    """
    Run the pipeline once, synchronously, and return its report.

    - Unknown profile           -> 400
    - Invalid configuration     -> 500
    - A run already in progress -> 409 RUN_IN_PROGRESS
    - Incoming dir unreadable   -> 503
    """
    try:
        profile = get_profile(request.profile)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    if not _run_lock.acquire(blocking=False):
        raise HTTPException(
            status_code=409,
            detail={
                "code": "RUN_IN_PROGRESS",
                "message": "A pipeline run is already in progress",
            },
        )

    try:
        return run_pipeline(config, profile)
    except ScanError as e:
        logger.error(f"Pipeline run aborted: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    finally:
        _run_lock.release()
