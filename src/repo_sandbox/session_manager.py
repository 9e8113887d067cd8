# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

import asyncio
import time
from dataclasses import dataclass

import httpx
from loguru import logger

from repo_sandbox.config import DeployConfig
from repo_sandbox.session import DeploySession


@dataclass
class ManagedSession:
    session: DeploySession
    last_accessed: float


class SessionManager:
    """Manages the lifecycle of deploy sessions.

    Handles creation, caching, and automatic cleanup of idle sessions.
    All sessions share one HTTP connection pool. Uses a background reaper
    task to close expired sessions.
    """

    def __init__(self, config: DeployConfig | None = None, client: httpx.AsyncClient | None = None):
        """Initializes the SessionManager.

        Args:
            config: Optional configuration object. If not provided, defaults are used.
            client: Optional httpx.AsyncClient shared by all sessions.
        """
        self.config = config or DeployConfig()
        self._internal_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.config.request_timeout)
        self.sessions: dict[str, ManagedSession] = {}
        self._reaper_task: asyncio.Task[None] | None = None
        self._creation_lock = asyncio.Lock()

    async def get_or_create_session(self, session_id: str) -> DeploySession:
        """Retrieve existing session or create a new one.

        Updates the last_accessed timestamp for the session.

        Args:
            session_id: The unique identifier for the session.

        Returns:
            DeploySession: The session object.

        Raises:
            ValueError: If session_id is empty.
        """
        if not session_id:
            raise ValueError("Session ID is required")

        await self._start_reaper_if_needed()

        # Optimistic check
        if session_id in self.sessions:
            managed = self.sessions[session_id]
            managed.last_accessed = time.time()
            return managed.session

        async with self._creation_lock:
            # Double-check inside lock
            if session_id in self.sessions:
                managed = self.sessions[session_id]
                managed.last_accessed = time.time()
                return managed.session

            logger.info(f"Creating new deploy session: {session_id}")
            session = DeploySession(self.config, self._client)
            self.sessions[session_id] = ManagedSession(session=session, last_accessed=time.time())
            return session

    async def _start_reaper_if_needed(self) -> None:
        """Start the background reaper task if it is not already running."""
        if self._reaper_task is None or self._reaper_task.done():
            self._reaper_task = asyncio.create_task(self._reaper_loop())

    async def _reaper_loop(self) -> None:
        """Background task to close expired sessions.

        Sessions with a deployment in progress are never reaped.
        """
        logger.info("Session reaper started")
        try:
            while True:
                await asyncio.sleep(self.config.reaper_interval)
                await self.reap_expired()
        except asyncio.CancelledError:
            logger.info("Session reaper cancelled")
        except Exception as e:
            logger.error(f"Session reaper crashed: {e}")

    async def reap_expired(self) -> list[str]:
        """Closes and drops sessions idle longer than the idle timeout.

        Returns:
            list[str]: The IDs of the reaped sessions.
        """
        now = time.time()
        # Snapshot to avoid modifying dict while iterating
        expired_ids = [
            sid
            for sid, managed in self.sessions.items()
            if now - managed.last_accessed > self.config.idle_timeout and not managed.session.busy
        ]

        for sid in expired_ids:
            logger.info(f"Session {sid} expired. Closing.")
            managed = self.sessions.pop(sid, None)
            if managed:
                try:
                    await managed.session.aclose()
                except Exception as e:
                    logger.error(f"Error closing expired session {sid}: {e}")
        return expired_ids

    async def shutdown(self) -> None:
        """Close all sessions and stop the reaper."""
        if self._reaper_task and not self._reaper_task.done():
            self._reaper_task.cancel()
            try:
                await self._reaper_task
            except asyncio.CancelledError:
                pass
            self._reaper_task = None

        logger.info(f"Shutting down SessionManager. Closing {len(self.sessions)} sessions.")

        sessions_to_close = list(self.sessions.values())
        self.sessions.clear()

        for managed in sessions_to_close:
            try:
                await managed.session.aclose()
            except Exception as e:
                logger.error(f"Error closing session during shutdown: {e}")

        if self._internal_client:
            await self._client.aclose()
