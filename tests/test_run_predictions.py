"""
Unit Tests for the Prediction Batch Script
"""

import json

import pytest

from match_insights.domain.exceptions import EnvelopeBuildException
from scripts import run_predictions


class TestRunPredictions:
    """Tests for the run_predictions command."""

    @pytest.fixture(autouse=True)
    def keep_test_logging(self, monkeypatch):
        """Leave pytest's log handlers in place."""
        monkeypatch.setattr(run_predictions, "configure_logging", lambda level=None: None)

    @pytest.fixture
    def batch_file(self, tmp_path):
        """Create a one-match batch file."""
        path = tmp_path / "batch.json"
        path.write_text(json.dumps([
            {"match_id": "m-1", "home_team": {"name": "Rovers"}, "away_team": {"name": "Wanderers"}},
        ]))
        return path

    def test_prints_envelope(self, batch_file, capsys):
        """Test a valid batch prints the envelope as JSON."""
        assert run_predictions.main([str(batch_file)]) == 0

        envelope = json.loads(capsys.readouterr().out)
        assert envelope["data"]["metadata"]["total"] == 1
        assert envelope["data"]["predictions"][0]["match_id"] == "m-1"

    def test_transform_failure_exits_nonzero(self, batch_file, monkeypatch):
        """Test an engine failure is reported through the exit code."""
        def failing_transform(batch, page=1):
            raise EnvelopeBuildException("Failed to build prediction envelope")

        monkeypatch.setattr(run_predictions, "transform", failing_transform)
        assert run_predictions.main([str(batch_file)]) == 1

    def test_unreadable_batch_file(self, tmp_path):
        """Test a missing batch file exits non-zero."""
        assert run_predictions.main([str(tmp_path / "missing.json")]) == 1
