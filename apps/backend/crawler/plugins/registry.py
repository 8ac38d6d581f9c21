"""
Plugin registry for managing extraction plugins.

Plugins are keyed by the site identifier produced by the site classifier;
the generic plugin is the default for unknown sites.
"""
import logging
from typing import Dict, List, Optional, Union

from .base import ExtractionPlugin
from core.site_classifier import SiteId

logger = logging.getLogger(__name__)

# Global registry instance
_registry: Optional['PluginRegistry'] = None


class PluginRegistry:
    """Registry for extraction plugins"""

    def __init__(self):
        self._plugins_by_site: Dict[SiteId, ExtractionPlugin] = {}
        self._default: Optional[ExtractionPlugin] = None
        self._advanced: Optional[ExtractionPlugin] = None

    def register(self, plugin: ExtractionPlugin):
        """Register a site plugin under its site id"""
        if plugin.site_id in self._plugins_by_site:
            logger.warning(f"Plugin for {plugin.site_id.value} already registered, replacing")

        self._plugins_by_site[plugin.site_id] = plugin
        logger.info(f"Registered plugin: {plugin.name} (site={plugin.site_id.value})")

    def set_fallbacks(self, generic: ExtractionPlugin, advanced: ExtractionPlugin):
        """Set the generic and advanced-generic fallback plugins"""
        self._default = generic
        self._advanced = advanced

    @property
    def generic(self) -> ExtractionPlugin:
        return self._default

    @property
    def advanced(self) -> ExtractionPlugin:
        return self._advanced

    def site_plugin(self, site: Union[SiteId, str]) -> Optional[ExtractionPlugin]:
        """Site-specific plugin for a site id, or None for generic/unknown sites"""
        try:
            site_id = SiteId(site)
        except ValueError:
            return None
        if site_id == SiteId.GENERIC:
            return None
        return self._plugins_by_site.get(site_id)

    def list_plugins(self) -> List[Dict]:
        """List all registered plugins"""
        plugins = list(self._plugins_by_site.values())
        plugins.extend(p for p in (self._default, self._advanced) if p is not None)
        return [
            {
                'name': plugin.name,
                'site': plugin.site_id.value,
                'class': plugin.__class__.__name__,
                'toleratesMissingPage': plugin.tolerates_missing_page,
            }
            for plugin in plugins
        ]


def get_plugin_registry() -> PluginRegistry:
    """Get or create the global plugin registry"""
    global _registry
    if _registry is None:
        _registry = PluginRegistry()
        # Auto-register built-in plugins
        _register_builtin_plugins(_registry)
    return _registry


def _register_builtin_plugins(registry: PluginRegistry):
    """Register all built-in plugins"""
    from .linkedin import LinkedInPlugin
    from .indeed import IndeedPlugin
    from .glassdoor import GlassdoorPlugin
    from .monster import MonsterPlugin
    from .ziprecruiter import ZipRecruiterPlugin
    from .dice import DicePlugin
    from .stackoverflow import StackOverflowPlugin
    from .github import GitHubPlugin
    from .amazon import AmazonPlugin
    from .flipkart import FlipkartPlugin
    from .generic import GenericPlugin, AdvancedGenericPlugin

    for plugin_cls in (
        LinkedInPlugin, IndeedPlugin, GlassdoorPlugin, MonsterPlugin, ZipRecruiterPlugin,
        DicePlugin, StackOverflowPlugin, GitHubPlugin, AmazonPlugin, FlipkartPlugin,
    ):
        registry.register(plugin_cls())

    registry.set_fallbacks(GenericPlugin(), AdvancedGenericPlugin())
