# FastAPI endpoints for peon-ping hooks
# Provides REST API for event submission, status monitoring and shutdown

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel
from typing import Dict, Any
import os
import signal
from app.event_processor import EventProcessor
from utils.hooks_constants import is_valid_host_event
from utils.colored_logger import setup_logger
from utils.constants import HTTPStatusConstants

logger = setup_logger(__name__)


class Event(BaseModel):
    """Pydantic model for incoming host events."""

    type: str
    properties: Dict[str, Any] = {}


def get_processor(request: Request) -> EventProcessor:
    processor = getattr(request.app.state, "processor", None)
    if processor is None:
        raise HTTPException(
            status_code=HTTPStatusConstants.INTERNAL_SERVER_ERROR,
            detail="Event processor not running",
        )
    return processor


def create_app(lifespan=None) -> FastAPI:
    """Create FastAPI application with configured endpoints."""
    app = FastAPI(lifespan=lifespan)

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.post("/events")
    async def create_event(event: Event, request: Request):
        """Endpoint to receive host events.

        Returns OK immediately after queuing the event for processing.
        """
        processor = get_processor(request)

        if not event.type:
            raise HTTPException(
                status_code=HTTPStatusConstants.BAD_REQUEST,
                detail="Event type is required",
            )

        # Unknown events are queued anyway and ignored by the router
        if not is_valid_host_event(event.type):
            logger.warning(f"Unknown host event received: {event.type}")

        try:
            queue_size = await processor.enqueue(event.model_dump())
        except Exception as e:
            logger.error(f"Error queuing event: {e}")
            raise HTTPException(
                status_code=HTTPStatusConstants.INTERNAL_SERVER_ERROR,
                detail="Failed to queue event",
            )

        return {
            "status": "ok",
            "message": "Event queued for processing",
            "queue_size": queue_size,
        }

    @app.get("/status")
    async def get_status(request: Request):
        """Session, pack and pause status for this server."""
        processor = get_processor(request)
        router = processor.router
        try:
            pack = router.active_pack() if router.config.enabled else None
            return {
                "session_id": router.session_id,
                "project": router.project_name,
                "enabled": router.config.enabled,
                "active_pack": pack,
                "paused": router.pause_gate.is_paused(),
                "queue_size": processor.queue.qsize(),
                "processed": processor.processed_count,
                "failed": processor.failed_count,
            }
        except Exception as e:
            logger.error(f"Error getting status: {e}")
            raise HTTPException(
                status_code=HTTPStatusConstants.INTERNAL_SERVER_ERROR,
                detail="Failed to get status",
            )

    @app.post("/shutdown")
    async def shutdown_server():
        """Shutdown the server gracefully.

        Triggers graceful shutdown sequence via SIGTERM signal.
        This allows the lifespan context manager to handle cleanup properly.
        """
        logger.info("Shutdown requested via API endpoint")
        try:
            os.kill(os.getpid(), signal.SIGTERM)
            return {"status": "ok", "message": "Server shutdown initiated"}
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")
            raise HTTPException(
                status_code=HTTPStatusConstants.INTERNAL_SERVER_ERROR,
                detail="Failed to shutdown server",
            )

    return app
