"""
PageMeta — Envelope Composer Unit Tests
=======================================

What:  Tests for wrapping, merging and stripping metadata.
Why:   The composer decides the final shape of every enriched response.

Test Strategy:
    ✅ Wrapping of scalars, lists, null and mappings without meta
    ✅ Merge into pre-existing metadata (preserve, overwrite, non-mapping)
    ✅ `found` only when the handler set a count
    ✅ Strip on rejection, idempotence, untouched non-mapping bodies
    ✅ Input bodies are never mutated
"""

import copy

import pytest

from pagemeta.config import PaginationOptions
from pagemeta.pipeline.composer import build_meta, compose_envelope, strip
from pagemeta.schemas.pagination import PaginationContext


@pytest.fixture
def context():
    return PaginationContext(page=1, limit=100)


class TestBuildMeta:
    """Tests for the metadata object."""

    def test_without_count(self, context):
        assert build_meta(context) == {"page": 1, "limit": 100}

    def test_with_count(self):
        context = PaginationContext(page=2, limit=10, count=57)
        assert build_meta(context) == {"page": 2, "limit": 10, "found": 57}

    def test_zero_count_is_reported(self):
        """A count of 0 is a real answer, not an absent one."""
        context = PaginationContext(page=1, limit=10, count=0)
        assert build_meta(context)["found"] == 0


class TestApproved:
    """Tests for the approve branch."""

    def test_wraps_scalar(self, context, options):
        body = compose_envelope("ok", context, True, options)
        assert body == {"meta": {"page": 1, "limit": 100}, "results": "ok"}

    def test_meta_key_comes_first(self, context, options):
        body = compose_envelope({"a": 1}, context, True, options)
        assert list(body.keys()) == ["meta", "results"]

    @pytest.mark.parametrize("original", [[1, 2, 3], None, 42, 1.5, True, {"this": "that"}])
    def test_wraps_any_body_without_meta(self, context, options, original):
        body = compose_envelope(original, context, True, options)
        assert body["results"] == original
        assert body["meta"] == {"page": 1, "limit": 100}

    def test_custom_keys(self, context):
        options = PaginationOptions(name="Some Name", results="output")
        body = compose_envelope("ok", context, True, options)
        assert list(body.keys()) == ["Some Name", "output"]

    def test_merges_into_existing_meta(self, context, options):
        original = {"meta": {"provided_by": "company"}, "results": "ok"}
        body = compose_envelope(original, context, True, options)
        assert body == {
            "meta": {"provided_by": "company", "page": 1, "limit": 100},
            "results": "ok",
        }
        assert list(body["meta"].keys()) == ["provided_by", "page", "limit"]

    def test_merge_overwrites_stale_fields(self, options):
        original = {"meta": {"page": 9, "found": 3, "source": "cache"}}
        context = PaginationContext(page=2, limit=5)
        body = compose_envelope(original, context, True, options)
        # found is not overwritten when no count was set this time
        assert body["meta"] == {"page": 2, "found": 3, "source": "cache", "limit": 5}

    def test_merge_does_not_wrap(self, context, options):
        original = {"meta": {}, "data": [1]}
        body = compose_envelope(original, context, True, options)
        assert "results" not in body
        assert body["data"] == [1]

    def test_non_mapping_meta_is_replaced(self, context, options):
        body = compose_envelope({"meta": "legacy", "results": []}, context, True, options)
        assert body == {"meta": {"page": 1, "limit": 100}, "results": []}

    def test_found_included_when_count_set(self, options):
        context = PaginationContext(page=1, limit=2, count=7)
        body = compose_envelope([1, 2], context, True, options)
        assert body["meta"] == {"page": 1, "limit": 2, "found": 7}

    def test_input_not_mutated(self, context, options):
        original = {"meta": {"provided_by": "company"}, "results": "ok"}
        snapshot = copy.deepcopy(original)
        compose_envelope(original, context, True, options)
        assert original == snapshot


class TestRejected:
    """Tests for the reject branch."""

    def test_strips_only_pagination_fields(self, context, options):
        original = {
            "meta": {"important": "yes", "page": 3, "limit": 10, "found": 2},
            "results": {"this": "that"},
        }
        body = compose_envelope(original, context, False, options)
        assert body == {"meta": {"important": "yes"}, "results": {"this": "that"}}

    def test_keeps_empty_nesting(self, context, options):
        body = compose_envelope({"meta": {"page": 1}}, context, False, options)
        assert body == {"meta": {}}

    @pytest.mark.parametrize("original", ["ok", [1, 2], None, {"this": "that"}, {"meta": "x"}])
    def test_leaves_other_bodies_alone(self, context, options, original):
        assert compose_envelope(original, context, False, options) == original

    def test_idempotent(self, options):
        original = {"meta": {"important": "yes", "page": 1, "limit": 100}, "results": 1}
        once = strip(original, options)
        twice = strip(once, options)
        assert once == twice == {"meta": {"important": "yes"}, "results": 1}

    def test_input_not_mutated(self, context, options):
        original = {"meta": {"important": "yes", "page": 1}}
        compose_envelope(original, context, False, options)
        assert original == {"meta": {"important": "yes", "page": 1}}

    def test_uses_configured_meta_key(self, context):
        options = PaginationOptions(name="info")
        original = {"info": {"page": 1, "x": 1}, "meta": {"page": 1}}
        body = compose_envelope(original, context, False, options)
        assert body == {"info": {"x": 1}, "meta": {"page": 1}}
