"""
================================================================================
Session Registry
================================================================================

Per-worker ownership of live browser sessions.

Each worker thread owns exactly one WorkerContext, and a context holds at
most one live SessionHandle. The registry is an ordinary object owned by the
coordinator (or the pytest session), not a module-level global, so its
contents can be inspected, torn down in bulk, and pruned when a worker
thread dies without cleaning up.

Features:
    - Thread-scoped get/set/clear
    - Idempotent teardown that never raises
    - Overwrite protection: a replaced live session is closed, never leaked
    - Orphan pruning for sessions whose owning thread has exited

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from loguru import logger

from .browser_variants import BrowserVariant
from .exceptions import TeardownError
from .session_handle import SessionHandle


def _close_quietly(handle: SessionHandle) -> Optional[TeardownError]:
    """Close a handle, converting any failure into a logged TeardownError."""
    try:
        handle.close()
    except Exception as e:
        error = TeardownError(
            f"Error while closing {handle.variant.display_name} session: {e}",
            variant=handle.variant,
            cause=e,
        )
        logger.warning(str(error))
        return error
    return None


class WorkerContext:
    """
    Explicit per-worker session holder.

    Passed to each test procedure so it can reach the session for the
    variant it is running against.

    Attributes:
        worker_id: Identity of the owning thread
    """

    def __init__(self, worker_id: int) -> None:
        self.worker_id = worker_id
        self._session: Optional[SessionHandle] = None

    @property
    def session(self) -> Optional[SessionHandle]:
        return self._session

    @property
    def driver(self):
        """Underlying WebDriver of the current session (None if idle)."""
        return self._session.driver if self._session else None

    @property
    def variant(self) -> Optional[BrowserVariant]:
        return self._session.variant if self._session else None

    def set(self, handle: SessionHandle) -> None:
        """
        Register a session for this worker.

        Registering over a live session is a caller error: it is logged
        and the prior session is closed before being replaced.
        """
        previous = self._session
        if previous is not None and previous is not handle and not previous.closed:
            logger.warning(
                f"Worker {self.worker_id} already owns a live "
                f"{previous.variant.display_name} session; closing it before "
                f"registering {handle.variant.display_name}"
            )
            _close_quietly(previous)
        self._session = handle

    def clear(self) -> None:
        self._session = None

    def teardown(self) -> Optional[TeardownError]:
        """
        Close and clear the current session.

        No-op when nothing is registered. Close errors are logged and
        returned, never raised; the entry is cleared either way.
        """
        handle = self._session
        if handle is None:
            return None
        try:
            logger.info(f"Tearing down {handle.variant.display_name} session")
            return _close_quietly(handle)
        finally:
            self._session = None


class SessionRegistry:
    """
    Maps worker threads to their WorkerContext.

    Usage:
        >>> registry = SessionRegistry()
        >>> registry.set_current(factory.create_session(CHROME))
        >>> registry.get_current().current_url
        'data:,'
        >>> registry.teardown_current()
    """

    def __init__(self) -> None:
        self._contexts: Dict[int, WorkerContext] = {}
        self._lock = threading.Lock()

    def context(self) -> WorkerContext:
        """Get (creating if needed) the calling thread's context."""
        worker_id = threading.get_ident()
        with self._lock:
            context = self._contexts.get(worker_id)
            if context is None:
                context = WorkerContext(worker_id)
                self._contexts[worker_id] = context
            return context

    def set_current(self, handle: SessionHandle) -> None:
        self.context().set(handle)

    def get_current(self) -> Optional[SessionHandle]:
        with self._lock:
            context = self._contexts.get(threading.get_ident())
        return context.session if context else None

    def clear_current(self) -> None:
        """Forget the current session without closing it."""
        with self._lock:
            self._contexts.pop(threading.get_ident(), None)

    def teardown_current(self) -> Optional[TeardownError]:
        """
        Close and forget the calling thread's session.

        Idempotent and never raises.

        Returns:
            TeardownError describing a failed close, else None
        """
        with self._lock:
            context = self._contexts.pop(threading.get_ident(), None)
        if context is None:
            return None
        return context.teardown()

    def teardown_all(self) -> List[TeardownError]:
        """Tear down every registered session (end of a run or pytest session)."""
        with self._lock:
            contexts = list(self._contexts.values())
            self._contexts.clear()

        errors = [error for error in (ctx.teardown() for ctx in contexts) if error]
        if contexts:
            logger.info(f"Tore down {len(contexts)} worker context(s), {len(errors)} close error(s)")
        return errors

    def prune_orphans(self) -> int:
        """
        Tear down sessions whose owning thread is no longer alive.

        Returns:
            Number of contexts removed
        """
        alive = {thread.ident for thread in threading.enumerate()}
        with self._lock:
            orphaned = [wid for wid in self._contexts if wid not in alive]
            contexts = [self._contexts.pop(wid) for wid in orphaned]

        for context in contexts:
            logger.warning(f"Pruning orphaned session of dead worker {context.worker_id}")
            context.teardown()
        return len(contexts)

    @property
    def active_count(self) -> int:
        """Number of workers currently holding a session."""
        with self._lock:
            return sum(1 for ctx in self._contexts.values() if ctx.session is not None)


__all__ = [
    "WorkerContext",
    "SessionRegistry",
]
