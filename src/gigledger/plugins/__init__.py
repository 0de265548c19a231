"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from gigledger.plugins.event_bus import EventBus, EventStatus, OutboxEvent
from gigledger.plugins.hookspecs import hookimpl
from gigledger.plugins.manager import PluginManager

__all__ = ["EventBus", "EventStatus", "OutboxEvent", "PluginManager", "hookimpl"]
