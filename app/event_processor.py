# Background event processor for peon-ping hooks
# Handles host events one at a time, in arrival order, and hands the resulting plans to the dispatcher

import asyncio
from typing import Any, Dict, Optional

from app.dispatcher import Dispatcher
from app.event_router import EventRouter
from app.types import DispatchPlan
from utils.colored_logger import setup_logger
from utils.hooks_constants import is_valid_host_event

logger = setup_logger(__name__)


class EventProcessor:
    """
    Single consumer over an asyncio queue.

    Each event is handled to completion before the next is taken, so events
    are processed in the order the host delivered them. State file I/O and
    delivery run in the default executor; spawned processes are not waited on.
    """

    def __init__(
        self,
        router: EventRouter,
        dispatcher: Dispatcher,
        queue: Optional[asyncio.Queue] = None,
    ):
        self.router = router
        self.dispatcher = dispatcher
        self.queue: asyncio.Queue = queue or asyncio.Queue()
        self.processed_count = 0
        self.failed_count = 0

    async def enqueue(self, event: Dict[str, Any]) -> int:
        """
        Queue an event for processing.

        Returns:
            int: Queue size after insertion
        """
        event_type = event.get("type")
        if not is_valid_host_event(event_type):
            logger.debug(f"Queued unknown host event: {event_type}")
        await self.queue.put(event)
        return self.queue.qsize()

    async def _deliver(self, plan: DispatchPlan) -> None:
        # Focus detection can block on a subprocess; keep it off the loop
        if not plan.is_empty:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.dispatcher.deliver, plan)

    async def start_session(self) -> DispatchPlan:
        """Greet on process start."""
        loop = asyncio.get_running_loop()
        plan = await loop.run_in_executor(None, self.router.handle_startup)
        await self._deliver(plan)
        logger.info(f"Session {self.router.session_id} started")
        return plan

    async def process_single_event(self, event: Dict[str, Any]) -> DispatchPlan:
        """
        Resolve and deliver one event.

        Args:
            event: Host event with "type" and optional "properties"

        Returns:
            DispatchPlan that was delivered
        """
        loop = asyncio.get_running_loop()
        plan = await loop.run_in_executor(None, self.router.handle, event)
        await self._deliver(plan)
        if plan.category is not None:
            logger.info(f"Handled {event.get('type')} -> {plan.category}")
        return plan

    async def run(self) -> None:
        """Background task: process events until cancelled."""
        logger.info(f"Starting event processor for session {self.router.session_id}")
        while True:
            event = await self.queue.get()
            try:
                await self.process_single_event(event)
                self.processed_count += 1
            except Exception as e:
                # Never let one bad event stop the session
                self.failed_count += 1
                logger.error(f"Error processing event {event.get('type')}: {e}")
            finally:
                self.queue.task_done()
