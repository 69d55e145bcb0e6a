"""
Tests for FAQ seed file loading.
"""

import json
from pathlib import Path

import pytest
from src.errors import SeedDataError
from src.memory.seed import load_faq_entries


class TestLoadFaqEntries:
    """Test seed file validation."""

    def test_loads_entries_in_order(self, seed_file, seed_entries):
        """Entries come back in file order."""
        entries = load_faq_entries(seed_file)

        assert [e.question for e in entries] == [e["question"] for e in seed_entries]
        assert entries[0].response == seed_entries[0]["response"]

    def test_missing_file(self, tmp_path):
        """A missing file is a seed error."""
        with pytest.raises(SeedDataError, match="Cannot read"):
            load_faq_entries(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        """Broken JSON is a seed error."""
        path = tmp_path / "faq.json"
        path.write_text("[{\"question\": ", encoding="utf-8")

        with pytest.raises(SeedDataError, match="not valid JSON"):
            load_faq_entries(path)

    def test_not_a_list(self, tmp_path):
        """The top level must be an array."""
        path = tmp_path / "faq.json"
        path.write_text(json.dumps({"question": "q", "response": "r"}), encoding="utf-8")

        with pytest.raises(SeedDataError, match="malformed"):
            load_faq_entries(path)

    def test_missing_response(self, tmp_path):
        """Each entry needs both question and response."""
        path = tmp_path / "faq.json"
        path.write_text(json.dumps([{"question": "q"}]), encoding="utf-8")

        with pytest.raises(SeedDataError, match="malformed"):
            load_faq_entries(path)

    def test_bundled_faq_is_valid(self):
        """The FAQ shipped in data/ loads."""
        path = Path(__file__).parent.parent / "data" / "faq.json"

        entries = load_faq_entries(path)

        assert len(entries) > 0
        assert len({e.question for e in entries}) == len(entries)
