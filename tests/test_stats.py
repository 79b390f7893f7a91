import json

import pytest

from statcheck.stats import InMemoryStats, load_stats


def test_lookup_returns_value_or_none():
    stats = InMemoryStats({"requests.count": 42})
    assert stats("requests.count") == 42
    assert stats.get_stat("requests.count") == 42
    assert stats("missing") is None


def test_mapping_protocol():
    stats = InMemoryStats({"a": 1, "b": 2})
    assert len(stats) == 2
    assert set(stats) == {"a", "b"}
    assert stats["a"] == 1
    assert "b" in stats


def test_snapshot_is_a_copy():
    counters = {"a": 1}
    stats = InMemoryStats(counters)
    counters["a"] = 5
    assert stats("a") == 1


def test_load_yaml_flattens_nested_keys(write_file):
    path = write_file(
        "stats.yaml",
        """\
        spider:
          urls:
            found: 12
          errors: 0
        requests.count: 42
        """,
    )
    stats = load_stats(path)
    assert dict(stats) == {
        "spider.urls.found": 12,
        "spider.errors": 0,
        "requests.count": 42,
    }


def test_load_json(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text(json.dumps({"stats.auth.success": 3}))
    assert load_stats(path)("stats.auth.success") == 3


def test_load_empty_file(write_file):
    path = write_file("stats.yaml", "")
    assert len(load_stats(path)) == 0


@pytest.mark.parametrize("bad", ["'12'", "1.5", "true", "[1, 2]"])
def test_load_rejects_non_integer_counters(write_file, bad):
    path = write_file("stats.yaml", f"requests.count: {bad}\n")
    with pytest.raises(ValueError, match="requests.count"):
        load_stats(path)


def test_load_rejects_non_mapping(write_file):
    path = write_file("stats.yaml", "- 1\n")
    with pytest.raises(ValueError, match="mapping"):
        load_stats(path)


def test_load_rejects_duplicate_flattened_keys(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text(json.dumps({"a.b": 1, "a": {"b": 2}}))
    with pytest.raises(ValueError, match="'a.b'.*more than once"):
        load_stats(path)
