"""
Connectivity Monitor

Tracks the online/offline flag that gates every data access call and
notifies listeners on transitions. A reconnect always fires the online
listeners, which is how a sync cycle gets triggered.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import requests

logger = logging.getLogger(__name__)

Listener = Callable[[], Any]


def probe_connectivity(url: str, timeout: float = 3.0) -> bool:
    """
    Report whether ``url`` answers at all.

    Any HTTP response counts as online. No URL means there is nothing to
    probe and the environment is assumed to be online.
    """
    if not url:
        return True
    try:
        requests.head(url, timeout=timeout, allow_redirects=True)
        return True
    except requests.RequestException as e:
        logger.info(f"Connectivity probe to {url} failed: {e}")
        return False


class ConnectivityMonitor:
    """
    Online/offline flag with observer-style subscriptions.

    Usage:
        monitor = ConnectivityMonitor(online=True)
        monitor.on_online(reconciler.sync)
        monitor.set_offline()
        monitor.set_online()  # schedules reconciler.sync()
    """

    def __init__(
        self,
        online: Optional[bool] = None,
        probe_url: str = "",
        probe_timeout: float = 3.0,
    ):
        self.probe_url = probe_url
        self.probe_timeout = probe_timeout
        self._online = online if online is not None else self.probe()
        self._online_listeners: list[Listener] = []
        self._offline_listeners: list[Listener] = []
        self._tasks: set[asyncio.Task] = set()

    @property
    def is_online(self) -> bool:
        return self._online

    def probe(self) -> bool:
        return probe_connectivity(self.probe_url, self.probe_timeout)

    def _subscribe(self, listeners: list[Listener], callback: Listener) -> Callable[[], None]:
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def on_online(self, callback: Listener) -> Callable[[], None]:
        """Register a callback for the "became online" event. Returns an unsubscribe callable."""
        return self._subscribe(self._online_listeners, callback)

    def on_offline(self, callback: Listener) -> Callable[[], None]:
        """Register a callback for the "became offline" event. Returns an unsubscribe callable."""
        return self._subscribe(self._offline_listeners, callback)

    def _run(self, coro) -> None:
        """Schedule a coroutine on the running loop, or run it when there is none."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return

        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _emit(self, listeners: list[Listener], event: str) -> None:
        for callback in list(listeners):
            try:
                result = callback()
                if asyncio.iscoroutine(result):
                    self._run(result)
            except Exception as e:
                logger.error(f"Connectivity listener failed on {event}: {e}")

    def set_online(self) -> None:
        """Mark online and notify listeners, even if already online."""
        self._online = True
        logger.info("Connection restored")
        self._emit(self._online_listeners, "online")

    def set_offline(self) -> None:
        """Mark offline and notify listeners."""
        self._online = False
        logger.info("Connection lost")
        self._emit(self._offline_listeners, "offline")

    def refresh(self) -> bool:
        """Re-probe the environment and emit an event only on a transition."""
        online = self.probe()
        if online and not self._online:
            self.set_online()
        elif not online and self._online:
            self.set_offline()
        return self._online

    async def wait_for_pending(self) -> None:
        """Wait for listener tasks scheduled on the running loop."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
