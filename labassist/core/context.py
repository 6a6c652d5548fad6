"""
Application Context

Everything with a process lifetime (settings, the Gemini gateway and the
chat session store) lives on one AppContext, created by the FastAPI startup
hook and closed on shutdown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from labassist.config import Settings, settings as default_settings
from labassist.core.gemini_client import GeminiClient
from labassist.memory.session_store import Scheduler, SessionStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    gateway: GeminiClient
    sessions: SessionStore

    def close(self) -> None:
        self.sessions.clear_all()
        logger.info("Application context closed")


def create_context(
    config: Settings = default_settings,
    gateway: Optional[GeminiClient] = None,
    scheduler: Optional[Scheduler] = None,
) -> AppContext:
    """Build the context; *gateway* and *scheduler* are injectable for tests."""
    return AppContext(
        settings=config,
        gateway=gateway or GeminiClient(config),
        sessions=SessionStore(config, scheduler=scheduler),
    )
