"""
Unit tests for the per-domain learning store.
"""

import json
import asyncio
import threading
import pytest
from unittest.mock import patch

from core.errors import PersistenceFailure
from core.learning_store import LearningStore, confidence_tier
from pipeline.records import JobRecord


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "learning.json"


class TestConfidenceTier:
    """Test confidence derivation."""

    def test_tiers(self):
        assert confidence_tier(0, 0) == 'low'
        assert confidence_tier(4, 1.0) == 'low'
        assert confidence_tier(5, 0.61) == 'medium'
        assert confidence_tier(5, 0.6) == 'low'
        assert confidence_tier(10, 0.81) == 'high'
        assert confidence_tier(10, 0.8) == 'medium'
        assert confidence_tier(50, 0.5) == 'low'

    def test_documented_examples(self):
        assert confidence_tier(10, 0.85) == 'high'
        assert confidence_tier(5, 0.65) == 'medium'
        assert confidence_tier(1, 1.0) == 'low'


class TestLearningStore:
    """Test running-mean updates and persistence."""

    def test_missing_file_starts_empty(self, store_path):
        store = LearningStore(store_path)
        assert len(store) == 0
        assert store.get_stats("example.com") == {
            'isNewSite': True, 'attempts': 0, 'successRate': 0, 'confidence': 'low',
        }

    @pytest.mark.asyncio
    async def test_running_mean(self, store_path):
        store = LearningStore(store_path)
        for sample in (1.0, 0.0, 0.5):
            await store.record_outcome("example.com", None, sample)

        stats = store.get_stats("example.com")
        assert stats['isNewSite'] is False
        assert stats['attempts'] == 3
        assert stats['successRate'] == pytest.approx(0.5)
        assert stats['confidence'] == 'low'

    @pytest.mark.asyncio
    async def test_sample_is_clamped(self, store_path):
        store = LearningStore(store_path)
        await store.record_outcome("example.com", None, 1.7)
        await store.record_outcome("example.com", None, -3)
        assert store.get_stats("example.com")['successRate'] == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_field_hits(self, store_path):
        store = LearningStore(store_path)
        record = JobRecord(title="Engineer", company="Acme", skills=["Go"], source="generic")
        profile = await store.record_outcome("example.com", record, 0.5)
        assert profile['fieldHits'] == {'title': 1, 'company': 1, 'skills': 1}

        await store.record_outcome("example.com", JobRecord(title="Other"), 0.2)
        assert store.get_stats("example.com")['fieldHits']['title'] == 2

    @pytest.mark.asyncio
    async def test_persists_and_reloads(self, store_path):
        store = LearningStore(store_path)
        await store.record_outcome("www.amazon.jobs", None, 0.8)
        await store.record_outcome("www.amazon.jobs", None, 0.6)

        data = json.loads(store_path.read_text())
        assert data['sites']['www.amazon.jobs']['attempts'] == 2
        assert 'confidence' not in data['sites']['www.amazon.jobs']
        assert 'lastUpdated' in data

        reloaded = LearningStore(store_path)
        assert reloaded.get_stats("www.amazon.jobs")['attempts'] == 2
        assert reloaded.get_stats("www.amazon.jobs")['successRate'] == pytest.approx(0.7)

    @pytest.mark.asyncio
    async def test_reload_is_field_for_field_identical(self, store_path):
        store = LearningStore(store_path)
        record = JobRecord(title="Engineer", location="Remote", skills=["Go"])
        await store.record_outcome("example.com", record, 0.35)
        await store.record_outcome("other.example.com", None, 0)

        reloaded = LearningStore(store_path)
        for domain in ("example.com", "other.example.com"):
            assert reloaded.get_profile(domain) == store.get_profile(domain)

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_not_lost(self, store_path):
        store = LearningStore(store_path)
        await asyncio.gather(*[
            store.record_outcome("example.com", None, 1.0) for _ in range(25)
        ])
        assert store.get_stats("example.com")['attempts'] == 25
        assert LearningStore(store_path).get_stats("example.com")['attempts'] == 25

    def test_corrupt_file_is_quarantined(self, store_path):
        store_path.write_text("{not json")
        store = LearningStore(store_path)

        assert len(store) == 0
        assert not store_path.exists()
        backups = list(store_path.parent.glob("learning.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text() == "{not json"

    def test_wrong_structure_is_quarantined(self, store_path):
        store_path.write_text(json.dumps(["not", "a", "document"]))
        store = LearningStore(store_path)
        assert len(store) == 0
        assert list(store_path.parent.glob("learning.json.corrupt-*"))

    def test_partial_profiles_are_tolerated(self, store_path):
        store_path.write_text(json.dumps({
            'sites': {
                'old.example.com': {'attempts': 6, 'successRate': 0.9},
                'broken.example.com': 'nonsense',
            }
        }))
        store = LearningStore(store_path)
        assert len(store) == 1
        stats = store.get_stats('old.example.com')
        assert stats['confidence'] == 'medium'
        assert stats['fieldHits'] == {}

    @pytest.mark.asyncio
    async def test_write_failure_keeps_memory_state(self, store_path):
        store = LearningStore(store_path)
        with patch.object(store, '_save', side_effect=PersistenceFailure("disk full")):
            profile = await store.record_outcome("example.com", None, 1.0)

        assert profile['attempts'] == 1
        assert store.get_stats("example.com")['attempts'] == 1
        assert not store_path.exists()

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self, store_path):
        store = LearningStore(store_path)
        await store.record_outcome("example.com", None, 1.0)
        snapshot = store.snapshot()
        snapshot['sites']['example.com']['attempts'] = 99
        assert store.get_stats("example.com")['attempts'] == 1
        assert store.get_profile("missing.example.com") is None

    @pytest.mark.asyncio
    async def test_file_write_runs_off_the_event_loop(self, store_path):
        store = LearningStore(store_path)
        loop_thread = threading.get_ident()
        write_threads = []
        original_save = store._save

        def recording_save():
            write_threads.append(threading.get_ident())
            original_save()

        with patch.object(store, '_save', side_effect=recording_save):
            await store.record_outcome("example.com", None, 1.0)

        assert write_threads and write_threads[0] != loop_thread
        assert json.loads(store_path.read_text())['sites']['example.com']['attempts'] == 1
