"""
Integration tests for the CLI commands.
"""

import pytest
from typer.testing import CliRunner
from unittest.mock import AsyncMock, patch

from healing_locator.engine.adaptive import AdaptiveSelector
from healing_locator.engine.fingerprint import ElementFingerprint
from healing_locator.engine.strategy_tracker import StrategyRecord
from healing_locator.exceptions import ResolutionFailure
from healing_locator.main import _matched_record, app


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def learning_file(tmp_path, page, locator_settings):
    """Learning data with two targets and one fingerprint."""
    selector = AdaptiveSelector(page, locator_settings)
    selector.tracker.record("SaudiIdInput", 'css: input[name*="id"]', 0, success=False)
    selector.tracker.record("SaudiIdInput", "placeholder: Saudi ID", 1, success=True)
    selector.tracker.record("LoginButton", "text: Login", 2, success=True)
    selector._fingerprints["SaudiIdInput"] = ElementFingerprint(
        "input", {"placeholder": "Saudi ID"}, None, (10.0, 20.0), (300.0, 40.0),
    )
    path = tmp_path / "learning.json"
    selector.save_learning_data(path)
    return path


class TestCLIStats:
    """Test the 'stats' CLI command."""

    def test_stats_help(self, runner):
        result = runner.invoke(app, ["stats", "--help"])
        assert result.exit_code == 0
        assert "Show strategy statistics" in result.stdout

    def test_stats_all_targets(self, runner, learning_file):
        result = runner.invoke(app, ["stats", str(learning_file)])

        assert result.exit_code == 0
        assert "SaudiIdInput" in result.stdout
        assert "LoginButton" in result.stdout
        assert "placeholder: Saudi ID" in result.stdout
        assert "60%" in result.stdout

    def test_stats_single_target(self, runner, learning_file):
        result = runner.invoke(app, ["stats", str(learning_file), "--identifier", "LoginButton"])

        assert result.exit_code == 0
        assert "LoginButton" in result.stdout
        assert "SaudiIdInput" not in result.stdout

    def test_stats_unknown_target(self, runner, learning_file):
        result = runner.invoke(app, ["stats", str(learning_file), "-i", "Nope"])

        assert result.exit_code == 1
        assert "No statistics for Nope" in result.stdout

    def test_stats_missing_file(self, runner, tmp_path):
        result = runner.invoke(app, ["stats", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Cannot read learning data" in result.stdout

    def test_stats_invalid_file(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json")

        result = runner.invoke(app, ["stats", str(path)])

        assert result.exit_code == 1
        assert "Invalid learning data" in result.stdout

    def test_stats_empty(self, runner, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text('{"version": 1, "strategies": {}, "fingerprints": {}}')

        result = runner.invoke(app, ["stats", str(path)])

        assert result.exit_code == 0
        assert "No statistics recorded" in result.stdout


class TestCLIFingerprints:
    """Test the 'fingerprints' CLI command."""

    def test_fingerprints(self, runner, learning_file):
        result = runner.invoke(app, ["fingerprints", str(learning_file)])

        assert result.exit_code == 0
        assert "SaudiIdInput" in result.stdout
        assert "input" in result.stdout
        assert "10,20" in result.stdout

    def test_fingerprints_empty(self, runner, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text('{"version": 1}')

        result = runner.invoke(app, ["fingerprints", str(path)])

        assert result.exit_code == 0
        assert "No fingerprints recorded" in result.stdout


class TestCLIProbe:
    """Test the 'probe' CLI command."""

    def test_probe_help(self, runner):
        result = runner.invoke(app, ["probe", "--help"])
        assert result.exit_code == 0
        assert "--identifier" in result.stdout
        assert "--visible" in result.stdout

    def test_probe_requires_identifier(self, runner):
        result = runner.invoke(app, ["probe", "https://example.com"])
        assert result.exit_code != 0

    def test_probe_passes_options(self, runner):
        with patch("healing_locator.main._probe_async", new_callable=AsyncMock) as probe, \
                patch("healing_locator.main.setup_logging_from_settings"):
            result = runner.invoke(app, [
                "probe", "https://example.com",
                "--identifier", "Heading",
                "--role", "heading",
                "--text", "Example",
                "--css", "h1",
            ])

        assert result.exit_code == 0
        args, kwargs = probe.call_args
        assert args[0] == "https://example.com"
        assert args[1] == "Heading"
        assert args[2]["role"] == "heading"
        assert args[2]["name"] is None
        assert args[2]["css"] == "h1"
        assert args[2]["xpath"] is None
        assert kwargs["headless"] is True

    def test_probe_resolution_failure(self, runner):
        failure = ResolutionFailure("Heading", "adaptive and recovery both exhausted", ["css: h1"])
        with patch("healing_locator.main._probe_async", new_callable=AsyncMock, side_effect=failure), \
                patch("healing_locator.main.setup_logging_from_settings"):
            result = runner.invoke(app, ["probe", "https://example.com", "-i", "Heading", "--css", "h1"])

        assert result.exit_code == 1
        assert "Could not resolve 'Heading'" in result.stdout


class TestMatchedRecord:
    """Which candidate the probe reports as the match."""

    def test_picks_candidate_that_matched_this_run(self):
        # Earlier runs already succeeded with the placeholder; this run used the label
        before = {"placeholder: Saudi ID": 3, "label: Saudi ID": 1, 'css: input[name*="id"]': 0}
        records = [
            StrategyRecord("placeholder: Saudi ID", 1, 0.6, attempts=5, successes=3),
            StrategyRecord("label: Saudi ID", 2, 0.7, attempts=2, successes=2),
            StrategyRecord('css: input[name*="id"]', 0, 0.4, attempts=2, successes=0),
        ]

        assert _matched_record(before, records).name == "label: Saudi ID"

    def test_new_record(self):
        records = [StrategyRecord("text: Login", 0, 0.6, attempts=1, successes=1)]

        assert _matched_record({}, records).name == "text: Login"

    def test_recovered_without_candidate(self):
        before = {"text: Login": 2}
        records = [StrategyRecord("text: Login", 0, 0.55, attempts=4, successes=2)]

        assert _matched_record(before, records) is None
