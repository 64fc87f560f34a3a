"""
Service wiring.

Builds every collaborator once and connects the observer hooks:
reconnect -> sync, banner retry -> sync.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from ballotsync.alerts.slack import SlackAlerter
from ballotsync.clients.apps_script import AppsScriptClient
from ballotsync.config import Settings, get_settings
from ballotsync.connectivity import ConnectivityMonitor
from ballotsync.logging.sync_logger import get_logger
from ballotsync.models import AppState
from ballotsync.notifier import OfflineNotifier
from ballotsync.reconciler import StateReconciler
from ballotsync.service import DataAccessService
from ballotsync.storage.cache import LocalCache
from ballotsync.storage.kv import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class SyncServices:
    """Container of the wired collaborators, passed by reference to consumers."""
    settings: Settings
    client: AppsScriptClient
    cache: LocalCache
    connectivity: ConnectivityMonitor
    notifier: OfflineNotifier
    service: DataAccessService
    reconciler: StateReconciler
    state: AppState = field(default_factory=AppState)

    def status(self) -> dict:
        """Snapshot of connectivity, banner, cache and configuration."""
        banner = self.notifier.banner
        return {
            "online": self.connectivity.is_online,
            "configured": self.settings.is_configured(),
            "offline_banner": banner.to_dict() if banner else None,
            "cache": self.cache.to_dict(),
            "last_sync_result": (
                self.reconciler.last_result.to_dict() if self.reconciler.last_result else None
            ),
            "environment": self.settings.environment,
        }


def build_services(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    client: Optional[AppsScriptClient] = None,
    connectivity: Optional[ConnectivityMonitor] = None,
    alerter: Optional[SlackAlerter] = None,
    state: Optional[AppState] = None,
) -> SyncServices:
    """
    Construct and wire all collaborators.

    Args:
        settings: Settings (uses get_settings() if not provided)
        store: Durable store (JSON file at settings.cache_path if not provided)
        client: Apps Script client (built from settings if not provided)
        connectivity: Monitor (probes settings.connectivity_probe_url if not provided)
        alerter: Alerter (Slack or NoOp from settings if not provided)
        state: Shared application state (a fresh AppState if not provided)

    Returns:
        SyncServices
    """
    if settings is None:
        settings = get_settings()

    settings.config_status()

    if store is None:
        store = JsonFileStore(settings.cache_path)
    if client is None:
        client = AppsScriptClient.from_settings(settings)
    if connectivity is None:
        connectivity = ConnectivityMonitor(
            probe_url=settings.connectivity_probe_url,
            probe_timeout=settings.probe_timeout,
        )
    if alerter is None:
        alerter = SlackAlerter.from_settings(settings)
    if state is None:
        state = AppState()

    cache = LocalCache(store)
    notifier = OfflineNotifier(alerter=alerter)
    service = DataAccessService(
        client=client,
        cache=cache,
        connectivity=connectivity,
        notifier=notifier,
        log=get_logger(level=settings.log_level),
    )
    reconciler = StateReconciler(
        service=service,
        state=state,
        connectivity=connectivity,
        notifier=notifier,
        alerter=alerter,
    )

    connectivity.on_online(reconciler.sync_on_reconnect)
    notifier.bind_retry(reconciler.sync_on_retry)

    logger.info(
        f"Services ready (online={connectivity.is_online}, cache={settings.cache_path})"
    )

    return SyncServices(
        settings=settings,
        client=client,
        cache=cache,
        connectivity=connectivity,
        notifier=notifier,
        service=service,
        reconciler=reconciler,
        state=state,
    )


@lru_cache(maxsize=1)
def get_services() -> SyncServices:
    """Get or create the process-wide SyncServices instance."""
    return build_services()
