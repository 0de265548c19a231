"""Plugin loading.

Plugins are pip-installed packages publishing a ``gigledger.plugins``
entry point, or objects handed to :meth:`PluginManager.register` directly
(tests, embedding applications).
"""

from __future__ import annotations

import logging

import pluggy

from gigledger.plugins.hookspecs import PROJECT_NAME, GigledgerHookSpec

ENTRY_POINT_GROUP = "gigledger.plugins"

logger = logging.getLogger(__name__)


class PluginManager(pluggy.PluginManager):
    """pluggy manager bound to the gigledger hookspecs."""

    def __init__(self) -> None:
        super().__init__(PROJECT_NAME)
        self.add_hookspecs(GigledgerHookSpec)

    def register(self, plugin: object, name: str | None = None) -> str | None:
        """Register *plugin*, named after its class unless *name* is given."""
        return super().register(plugin, name=name or type(plugin).__name__)

    def discover(self) -> list[str]:
        """Load entry-point plugins; returns every registered plugin name."""
        count = self.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Loaded %d plugin(s) from %s", count, ENTRY_POINT_GROUP)
        return self.plugin_names()

    def plugin_names(self) -> list[str]:
        return sorted(name for name, _ in self.list_name_plugin())
