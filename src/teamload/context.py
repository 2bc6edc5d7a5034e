"""Application context for dependency injection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .controllers import BoardController
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelAllocationStore
from .logging_config import setup_logging
from .services.allocation_sync import BackgroundWriter

logger = logging.getLogger("teamload.context")


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    engine: Any
    session_factory: Callable[[], Session]
    store: SQLModelAllocationStore
    writer: BackgroundWriter
    controller: BoardController

    def close(self) -> None:
        """Drain queued store writes and release the engine."""
        if not self.writer.flush(timeout=30):
            logger.warning("Closing with %d store write(s) still pending", self.writer.pending)
        self.writer.shutdown(wait=True)
        self.engine.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None, *, configure_logging: bool = True
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()
    if configure_logging:
        setup_logging(config)

    engine, session_factory = bootstrap_database(config)

    store = SQLModelAllocationStore(session_factory)
    writer = BackgroundWriter(max_workers=config.SYNC_WORKERS)
    controller = BoardController(store, writer)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        store=store,
        writer=writer,
        controller=controller,
    )
