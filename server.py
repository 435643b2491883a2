#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "uvicorn",
#     "fastapi",
#     "pydantic",
#     "python-dotenv",
#     "pygame",
# ]
# ///

# Main server entry point for peon-ping hooks
# One server per host session: owns the session id, the burst window and the event queue

import asyncio
import uvicorn
from contextlib import asynccontextmanager
from app.api import create_app
from app.config_resolver import load_config
from app.dispatcher import Dispatcher, PlatformDispatcher
from app.event_processor import EventProcessor
from app.event_router import EventRouter, project_name_from_dir
from app.manifest_resolver import ManifestResolver
from app.pause_gate import PauseGate
from app.state_store import StateStore
from config import Config, config
from utils.colored_logger import (
    configure_root_logging,
    setup_file_logging,
    setup_logger,
)

configure_root_logging()
logger = setup_logger(__name__)


def build_processor(
    settings: Config, dispatcher: Dispatcher = None
) -> EventProcessor:
    """Wire the router and its collaborators from process settings."""
    router = EventRouter(
        peon_config=load_config(settings.config_path),
        state_store=StateStore(settings.state_path),
        manifest_resolver=ManifestResolver(settings.packs_dir),
        pause_gate=PauseGate(settings.paused_path),
        project_name=project_name_from_dir(settings.project_dir),
    )
    if dispatcher is None:
        dispatcher = PlatformDispatcher(tab_title_enabled=settings.set_tab_title)
    return EventProcessor(router, dispatcher)


def make_lifespan(settings: Config, dispatcher: Dispatcher = None):
    """Build the lifespan context manager for a given set of settings."""

    @asynccontextmanager
    async def lifespan(app):
        """Manage application lifecycle for startup and shutdown."""
        processor = build_processor(settings, dispatcher)
        app.state.processor = processor

        if settings.log_dir:
            log_file = setup_file_logging(processor.router.session_id, settings.log_dir)
            logger.info(f"Logging to {log_file}")

        if not processor.router.config.enabled:
            logger.info("peon-ping disabled in config, events will be ignored")

        await processor.start_session()
        task = asyncio.create_task(processor.run())
        logger.info(
            f"Server started for {processor.router.project_name} "
            f"(session {processor.router.session_id})"
        )
        yield
        # Shutdown
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        logger.info("Server shutdown complete")

    return lifespan


app = create_app(lifespan=make_lifespan(config))

if __name__ == "__main__":
    uvicorn.run(app, host=config.host, port=config.port)
