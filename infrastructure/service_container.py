"""
Service container for dependency injection and initialization.

This module centralizes service creation and wiring.

Usage:
    container = ServiceContainer(config, announcer_provider=announcer_for)
    await container.initialize()

    # Access services
    draft_service = container.draft_service
    captain_service = container.captain_service
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Callable

from config import (
    AUTO_CAPTAIN_DEADLINE_SECONDS,
    AUTO_CAPTAIN_ENABLED,
    AUTO_CAPTAIN_TICK_SECONDS,
    COMPLETED_DRAFT_HISTORY_LIMIT,
    DRAFT_RESET_MODE,
)
from domain.models.draft import DraftSession
from domain.services.captain_selection import CaptainSelectionService
from services.auto_captain_watcher import spawn_auto_resolution_watcher
from services.captain_service import CaptainService
from services.draft_events import DraftEvents
from services.draft_service import DraftService
from services.draft_state_manager import DraftStateManager
from services.interfaces import IAnnouncer, IMatchHistory

logger = logging.getLogger("pug_bot.infrastructure.container")

AnnouncerProvider = Callable[[int, DraftSession], "IAnnouncer | None"]


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Auto captain countdown
    auto_captain_enabled: bool = AUTO_CAPTAIN_ENABLED
    auto_captain_deadline_seconds: float = AUTO_CAPTAIN_DEADLINE_SECONDS
    auto_captain_tick_seconds: float = AUTO_CAPTAIN_TICK_SECONDS

    # Draft settings
    draft_reset_mode: str = DRAFT_RESET_MODE
    completed_draft_history_limit: int = COMPLETED_DRAFT_HISTORY_LIMIT

    # Seed for pick sequences and random captains (None = unseeded)
    random_seed: int | None = None


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection.

    Example:
        container = ServiceContainer(config)
        await container.initialize()

        # Services are now available
        draft_service = container.draft_service
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        *,
        match_history: IMatchHistory | None = None,
        announcer_provider: AnnouncerProvider | None = None,
    ):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
            match_history: Receives completed drafts
            announcer_provider: Returns the announcer for a draft's channel,
                                or None to skip the countdown for that draft
        """
        self.config = config or ServiceConfig()
        self.match_history = match_history
        self.announcer_provider = announcer_provider
        self._initialized = False
        self._services: dict = {}
        self._watchers: dict[int, asyncio.Task] = {}

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")
        self._init_core_services()
        self._init_draft_services()
        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_core_services(self) -> None:
        """Initialize the draft store and captain selection."""
        logger.debug("Initializing core services")

        rng = random.Random(self.config.random_seed)
        self._services["rng"] = rng
        self._services["state_manager"] = DraftStateManager(
            completed_history_limit=self.config.completed_draft_history_limit
        )
        self._services["events"] = DraftEvents()
        self._services["captain_selection"] = CaptainSelectionService(rng=rng)
        self._services["captain"] = CaptainService(
            self._services["state_manager"],
            selector=self._services["captain_selection"],
            events=self._services["events"],
        )

    def _init_draft_services(self) -> None:
        """Initialize the draft lifecycle service."""
        logger.debug("Initializing draft services")

        self._services["draft"] = DraftService(
            state_manager=self._services["state_manager"],
            captain_service=self._services["captain"],
            match_history=self.match_history,
            watcher_spawner=self.spawn_watcher if self.config.auto_captain_enabled else None,
            reset_mode=self.config.draft_reset_mode,
            rng=self._services["rng"],
        )

    def spawn_watcher(self, guild_id: int, session: DraftSession) -> asyncio.Task | None:
        """Start the auto captain countdown for the guild's current draft."""
        announcer = self.announcer_provider(guild_id, session) if self.announcer_provider else None
        if announcer is None:
            logger.debug(f"No announcer for draft {session.session_id}, countdown skipped")
            return None

        draft_service = self.draft_service
        task = spawn_auto_resolution_watcher(
            guild_id,
            self.config.auto_captain_deadline_seconds,
            self.config.auto_captain_tick_seconds,
            reader=self.state_manager,
            announcer=announcer,
            resolver=lambda: draft_service.auto_captain(guild_id, expected_thread_key=session.thread_key),
        )
        if task is not None:
            self._watchers[guild_id] = task
        return task

    def latest_watcher(self, guild_id: int) -> asyncio.Task | None:
        """Most recently spawned countdown task for a guild (possibly finished)."""
        return self._watchers.get(guild_id)

    # =========================================================================
    # Service accessors
    # =========================================================================

    @property
    def state_manager(self) -> "DraftStateManager | None":
        """Get the draft store."""
        return self._services.get("state_manager")

    @property
    def events(self) -> "DraftEvents | None":
        """Get the draft lifecycle signals."""
        return self._services.get("events")

    @property
    def captain_selection(self) -> "CaptainSelectionService | None":
        """Get the captain selection policy."""
        return self._services.get("captain_selection")

    @property
    def captain_service(self) -> "CaptainService | None":
        """Get captain service."""
        return self._services.get("captain")

    @property
    def draft_service(self) -> "DraftService | None":
        """Get draft service."""
        return self._services.get("draft")

    def expose_to_bot(self, bot) -> None:
        """
        Expose all services to a Discord bot object.

        Command cogs access services via bot.<service_name>.

        Args:
            bot: The Discord bot instance
        """
        bot.draft_state_manager = self.state_manager
        bot.captain_service = self.captain_service
        bot.draft_service = self.draft_service
        bot.draft_events = self.events
