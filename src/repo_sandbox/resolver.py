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
from typing import Callable

from loguru import logger

from repo_sandbox.config import DeployConfig
from repo_sandbox.debounce import Debouncer
from repo_sandbox.exceptions import BranchLookupError
from repo_sandbox.models import RepositoryRef
from repo_sandbox.source_host import SourceHostClient


class BranchResolver:
    """Keeps the branch list and the selected branch in sync with a repository.

    Rapid repository changes are debounced; a new lookup cancels the one in
    flight, so a stale response never overwrites newer state. Lookup failures
    are absorbed and reset the branch state.
    """

    def __init__(
        self,
        source: SourceHostClient,
        config: DeployConfig | None = None,
        on_selection_changed: Callable[[str], None] | None = None,
    ):
        """Initializes the BranchResolver.

        Args:
            source: Client for the source host.
            config: Configuration holding the debounce delay and default branch.
            on_selection_changed: Called with the new value whenever the selected branch changes.
        """
        self.config = config or DeployConfig()
        self.source = source
        self.on_selection_changed = on_selection_changed
        self.branches: list[str] = []
        self._selected_branch = ""
        self._debouncer = Debouncer(self.config.debounce_delay, self.perform_lookup)
        self._lookups: set[asyncio.Task[None]] = set()

    @property
    def selected_branch(self) -> str:
        return self._selected_branch

    @property
    def busy(self) -> bool:
        """Whether a lookup is scheduled or in flight."""
        return self._debouncer.pending or any(not task.done() for task in self._lookups)

    def select_branch(self, branch: str) -> None:
        """Overrides the selected branch. Any name is accepted."""
        if branch != self._selected_branch:
            self._selected_branch = branch
            if self.on_selection_changed is not None:
                self.on_selection_changed(branch)

    def on_repository_ref_changed(self, ref: RepositoryRef) -> None:
        """Schedules a debounced lookup for a repository.

        Incomplete references are ignored and leave the current state alone.
        """
        if not ref.is_complete:
            return
        self._debouncer.trigger(ref)

    async def perform_lookup(self, ref: RepositoryRef) -> None:
        """Looks up the branches of a repository, superseding any lookup in flight.

        Earlier lookups are cancelled and the new one is registered before the
        first suspension point. The new request is only issued once every
        superseded lookup has finished unwinding.
        """
        superseded = {task for task in self._lookups if not task.done()}
        if superseded:
            logger.debug(f"Cancelling {len(superseded)} superseded branch lookup(s)")
            for previous in superseded:
                previous.cancel()

        task = asyncio.create_task(self._lookup(ref, superseded))
        self._lookups.add(task)
        task.add_done_callback(self._lookups.discard)
        await asyncio.wait({task})

    async def settle(self) -> None:
        """Waits until no lookup is scheduled or in flight."""
        while True:
            await self._debouncer.wait()
            tasks = {task for task in self._lookups if not task.done()}
            if not tasks:
                return
            await asyncio.wait(tasks)

    async def aclose(self) -> None:
        """Cancels scheduled and in-flight lookups."""
        await self._debouncer.aclose()
        tasks = {task for task in self._lookups if not task.done()}
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)

    async def _lookup(self, ref: RepositoryRef, superseded: set[asyncio.Task[None]]) -> None:
        try:
            if superseded:
                await asyncio.wait(superseded)
            branches = await self.source.list_branches(ref)
        except asyncio.CancelledError:
            logger.debug(f"Branch lookup for {ref} aborted")
            self._reset()
            raise
        except BranchLookupError as e:
            logger.warning(f"Branch lookup failed: {e}")
            self._reset()
            return

        self.branches = branches
        default = self.config.default_branch
        self.select_branch(default if default in branches else "")
        logger.info(f"Resolved {len(branches)} branches for {ref}")

    def _reset(self) -> None:
        self.branches = []
        self.select_branch("")
