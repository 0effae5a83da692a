"""
Tests for the typer CLI
"""

import json
import os
import shutil
import tempfile
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sitesearch.cli.app import app

runner = CliRunner()


@pytest.mark.integration
class TestCLI:
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.env = {
            "DATABASE_PATH": os.path.join(self.temp_dir, "index.db"),
            "SITES": json.dumps([{"url": "https://example.com", "name": "Example"}]),
            "LOG_LEVEL": "WARNING",
        }

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def invoke(self, *args):
        with patch.dict(os.environ, self.env):
            return runner.invoke(app, list(args))

    def test_db_setup_and_status(self):
        result = self.invoke("db", "setup")
        assert result.exit_code == 0
        assert os.path.exists(self.env["DATABASE_PATH"])

        result = self.invoke("db", "status")
        assert result.exit_code == 0
        assert "search_index" in result.output

    def test_db_reset_requires_confirmation(self):
        assert self.invoke("db", "reset").exit_code == 1
        assert self.invoke("db", "reset", "--confirm").exit_code == 0

    def test_search_on_empty_index(self):
        result = self.invoke("search", "кошка")

        assert result.exit_code == 0
        assert "Found 0 pages" in result.output

    def test_search_rejects_unknown_site(self):
        result = self.invoke("search", "кошка", "--site", "https://unknown.org")

        assert result.exit_code == 1

    def test_index_page_out_of_scope(self):
        result = self.invoke("index-page", "https://other.org/page")

        assert result.exit_code == 1

    def test_crawl_without_sites(self):
        self.env["SITES"] = "[]"
        result = self.invoke("crawl")

        assert result.exit_code == 1

    def test_stats_on_empty_index(self):
        result = self.invoke("stats")

        assert result.exit_code == 0
        assert "Total: 0 pages, 0 lemmas" in result.output
