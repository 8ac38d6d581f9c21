"""
Extraction chain for a single job URL.

Fetches the page once, then escalates through plugins until one produces a
title:
1. Site-specific plugin (if the site classifier knows the board)
2. Generic plugin
3. Advanced-generic plugin (JSON-LD + attribute selector ladder)

If no tier finds a title, the richest partial record is returned; URL hints
may still fill the title downstream.
"""

import logging
from typing import List, Optional

from core.errors import ExtractionEmpty, FetchFailed
from core.net import PageFetcher
from core.site_classifier import SiteId, detect_job_site
from crawler.plugins import ExtractionPlugin, PluginResult, PluginRegistry, get_plugin_registry
from pipeline.records import JobRecord

logger = logging.getLogger(__name__)


class ExtractionOutcome:
    """What the extraction chain produced for one URL."""

    def __init__(self, record: JobRecord, site: SiteId, plugin: str, attempts: List[str]):
        self.record = record
        self.site = site
        self.plugin = plugin
        self.attempts = attempts

    def __repr__(self):
        return f"ExtractionOutcome(site={self.site.value}, plugin={self.plugin}, attempts={self.attempts})"


class JobExtractor:
    """Runs the fetch-once plugin escalation chain."""

    def __init__(self, fetcher: Optional[PageFetcher] = None, registry: Optional[PluginRegistry] = None):
        self.fetcher = fetcher or PageFetcher()
        self.registry = registry or get_plugin_registry()

    def _run(self, plugin: ExtractionPlugin, html: Optional[str], url: str) -> Optional[PluginResult]:
        """Run one plugin; a plugin exception counts as a failed tier."""
        try:
            result = plugin.extract(html, url)
        except Exception as e:
            logger.error(f"[extractor] Plugin {plugin.name} raised for {url}: {e}", exc_info=True)
            return None
        if not result.is_success():
            logger.info(f"[extractor] {ExtractionEmpty(plugin.name)}; escalating")
        return result

    async def extract(self, url: str) -> ExtractionOutcome:
        """
        Extract a raw job record from a URL.

        Raises:
            FetchFailed: if the page cannot be fetched and the site plugin has
                no URL-only fallback
        """
        site = detect_job_site(url)
        site_plugin = self.registry.site_plugin(site)
        attempts: List[str] = []

        try:
            page = await self.fetcher.fetch(url)
            html = page.html
        except Exception as e:
            if site_plugin is not None and site_plugin.tolerates_missing_page:
                hint = e.hint if isinstance(e, FetchFailed) else f"{type(e).__name__}: {e}"
                logger.warning(f"[extractor] Fetch failed for {url} ({hint}); {site_plugin.name} will use the URL")
                attempts.append(site_plugin.name)
                result = self._run(site_plugin, None, url)
                if result is not None:
                    return self._outcome(result.record, site, site_plugin.name, attempts)
            raise

        results: List[PluginResult] = []
        tiers = [site_plugin] if site_plugin is not None else []
        tiers += [self.registry.generic, self.registry.advanced]

        for plugin in tiers:
            attempts.append(plugin.name)
            result = self._run(plugin, html, url)
            if result is None:
                continue
            if result.is_success():
                return self._outcome(result.record, site, plugin.name, attempts)
            results.append(result)

        logger.warning(f"[extractor] No tier found a title for {url} (tried {', '.join(attempts)})")
        if results:
            best = max(results, key=lambda r: len(r.record.present_fields()))
            return self._outcome(best.record, site, 'partial', attempts)
        return self._outcome(JobRecord(apply_link=url), site, 'none', attempts)

    def _outcome(self, record: JobRecord, site: SiteId, plugin: str, attempts: List[str]) -> ExtractionOutcome:
        record = record.copy(source=site.value)
        logger.info(f"[extractor] {site.value} via {plugin}: fields={record.present_fields()}")
        return ExtractionOutcome(record, site, plugin, attempts)
