"""Tests for portfolio snapshot loading."""
import json

import pytest

import data_loader as dl


@pytest.fixture(autouse=True)
def reset_cache(monkeypatch):
    monkeypatch.setattr(dl, "_SNAPSHOT_CACHE", None)


class TestLoadSnapshot:
    def test_reads_json(self, tmp_path, sample_snapshot):
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps(sample_snapshot), encoding="utf-8")
        snapshot = dl.load_portfolio_snapshot(str(path))
        assert snapshot["hero"]["name"] == "Ada Example"
        assert len(snapshot["skills"]) == 5

    def test_missing_file_gives_empty_snapshot(self, tmp_path):
        snapshot = dl.load_portfolio_snapshot(str(tmp_path / "nope.json"))
        assert snapshot["hero"] == {}
        assert snapshot["skills"] == []

    def test_malformed_json_gives_empty_snapshot(self, tmp_path):
        path = tmp_path / "portfolio.json"
        path.write_text("{not json", encoding="utf-8")
        snapshot = dl.load_portfolio_snapshot(str(path))
        assert snapshot["projects"] == []

    def test_non_object_json_ignored(self, tmp_path):
        path = tmp_path / "portfolio.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert dl.load_portfolio_snapshot(str(path))["contact"] == {}

    def test_normalizes_shapes(self):
        snapshot = dl.normalize_snapshot({"hero": "x", "skills": [{"name": "Go"}, "junk"], "projects": None})
        assert snapshot["hero"] == {}
        assert snapshot["skills"] == [{"name": "Go"}]
        assert snapshot["projects"] == []

    def test_bundled_data_file_loads(self):
        snapshot = dl.load_portfolio_snapshot()
        assert snapshot["hero"].get("name")
        assert snapshot["skills"]
        assert snapshot["achievements"]
        assert snapshot["certifications"]


class TestSnapshotCache:
    def test_cached_until_refresh(self, tmp_path, monkeypatch, sample_snapshot):
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps(sample_snapshot), encoding="utf-8")
        monkeypatch.setattr(dl.config, "PORTFOLIO_DATA_FILE", str(path))

        first = dl.get_portfolio_snapshot()
        assert dl.get_portfolio_snapshot() is first

        refreshed = dl.refresh_portfolio_snapshot()
        assert refreshed is not first
        assert dl.get_portfolio_snapshot() is refreshed


class TestSkillsDataFrame:
    def test_columns_and_levels(self, sample_snapshot):
        df = dl.get_skills_df(sample_snapshot)
        assert list(df.columns) == ["name", "level"]
        assert df["level"].tolist() == [95, 90, 80, 85, 75]

    def test_bad_levels_and_names(self):
        df = dl.get_skills_df({"skills": [{"name": "Go", "level": "high"}, {"level": 50}, {"name": "Rust", "level": 150}]})
        assert df["name"].tolist() == ["Go", "Rust"]
        assert df["level"].tolist() == [0, 100]

    def test_empty(self, empty_snapshot):
        assert dl.get_skills_df(empty_snapshot).empty
