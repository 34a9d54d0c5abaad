"""
Tests for the per-project ranked batch cache.
"""
import pytest

from core.domain import StudentMatch
from core.cache.batch_cache import BatchMatchCache


def matches(*scores, source="model"):
    return [StudentMatch(student_id=f"s{i}", score=s, reasoning="r", source=source)
            for i, s in enumerate(scores)]


class TestBatchMatchCache:

    def test_put_and_get_full_list(self, batch_cache):
        ranked = matches(90, 80, 70)
        assert batch_cache.put("p1", ranked) is True

        assert batch_cache.get("p1") == ranked

    def test_empty_list_is_never_stored(self, batch_cache):
        assert batch_cache.put("p1", []) is False
        assert batch_cache.get("p1") is None
        assert batch_cache.stats()["total_entries"] == 0

    def test_ttl_shorter_when_any_fallback(self, batch_cache):
        mixed = matches(90) + matches(80, source="fallback")
        assert batch_cache.ttl_for(matches(90, 80)) == 600
        assert batch_cache.ttl_for(mixed) == 60

    def test_expiry_and_stats(self, batch_cache, clock):
        batch_cache.put("p1", matches(90))
        batch_cache.put("p2", matches(90), ttl_seconds=5000)
        clock.advance(601)

        assert batch_cache.stats() == {"total_entries": 2, "expired_entries": 1}
        assert batch_cache.get("p1") is None
        assert batch_cache.stats() == {"total_entries": 1, "expired_entries": 0}

    def test_invalidate_project(self, batch_cache):
        batch_cache.put("p1", matches(90))
        batch_cache.put("p2", matches(90))

        assert batch_cache.invalidate("p1") is True
        assert batch_cache.get("p1") is None
        assert batch_cache.get("p2") is not None

    def test_invalidate_by_student_drops_every_batch(self, batch_cache):
        batch_cache.put("p1", matches(90))
        batch_cache.put("p2", matches(90))

        assert batch_cache.invalidate_by_student("s-new") == 2
        assert batch_cache.get("p1") is None
        assert batch_cache.get("p2") is None

    def test_stale_token_write_is_skipped(self, batch_cache):
        token = batch_cache.write_token("p1")
        batch_cache.invalidate_by_student("s1")

        assert batch_cache.put("p1", matches(90), token=token) is False
        assert batch_cache.get("p1") is None

    def test_token_for_other_project_unaffected(self, batch_cache):
        token = batch_cache.write_token("p1")
        batch_cache.invalidate("p2")
        assert batch_cache.put("p1", matches(90), token=token) is True

    def test_clear_all(self, batch_cache):
        batch_cache.put("p1", matches(90))
        assert batch_cache.clear_all() == 1
        assert batch_cache.get("p1") is None

    def test_key_layout(self):
        assert BatchMatchCache.make_key("p1") == "match:project:p1"
