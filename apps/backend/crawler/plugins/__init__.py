"""
Extraction plugin system for the job scraper.

Plugins provide site-specific extraction logic, allowing for:
- Per-board CSS selector strategies
- URL-only fallbacks for sites that block automated clients
- Generic and advanced-generic extraction for unknown sites
"""

from .base import ExtractionPlugin, PluginResult, SelectorPlugin
from .registry import PluginRegistry, get_plugin_registry

__all__ = [
    'ExtractionPlugin',
    'PluginResult',
    'SelectorPlugin',
    'PluginRegistry',
    'get_plugin_registry'
]
