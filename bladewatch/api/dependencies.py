"""
Bladewatch API Dependencies
===========================

FastAPI dependency injection for shared resources.

Provides lazy-initialized singletons for:
    - Broadcaster (observer membership + heartbeat)
    - Database availability flag

The container starts in **degraded mode** when PostgreSQL is
unavailable; notification endpoints keep working and store-backed
routes fail on first use.

Author: Bladewatch Team
Version: 1.0.0
"""

import logging
from typing import Optional

from bladewatch.config import settings
from bladewatch.db.session import close_db, init_db
from bladewatch.notifications.broadcaster import Broadcaster


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Singleton container for shared services.

    Manages the lifecycle of the broadcaster and the database engine.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self):
        self._broadcaster: Optional[Broadcaster] = None
        self._initialized = False
        self.database_available = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = ServiceContainer()
        return cls._instance

    async def initialize(self) -> None:
        """Initialize all services (graceful degradation on failure)."""
        if self._initialized:
            return

        logger.info("Initializing service container...")

        # ── PostgreSQL ────────────────────────────────────────
        try:
            await init_db()
            self.database_available = True
        except Exception as e:
            logger.warning(
                f"PostgreSQL unavailable, running in DEGRADED mode: {e}"
            )
            self.database_available = False

        # ── Broadcaster ───────────────────────────────────────
        self.broadcaster.start()

        self._initialized = True
        logger.info("Service container initialized")

    async def shutdown(self) -> None:
        """Shutdown all services."""
        logger.info("Shutting down service container...")

        if self._broadcaster is not None:
            await self._broadcaster.stop()
            self._broadcaster = None

        try:
            await close_db()
        except Exception as e:
            logger.warning(f"Error closing database: {e}")

        self._initialized = False
        self.database_available = False
        logger.info("Service container shutdown complete")

    @property
    def broadcaster(self) -> Broadcaster:
        """Get the broadcaster, creating it on first use."""
        if self._broadcaster is None:
            self._broadcaster = Broadcaster(
                send_timeout=settings.notification_send_timeout,
                heartbeat_interval=settings.sse_heartbeat_interval,
            )
        return self._broadcaster


# Dependency functions for FastAPI
async def get_broadcaster() -> Broadcaster:
    """
    FastAPI dependency for the notification broadcaster.

    Override with ``app.dependency_overrides[get_broadcaster]`` in tests.
    """
    return ServiceContainer.get_instance().broadcaster
