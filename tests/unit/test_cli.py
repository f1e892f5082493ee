"""Unit tests for CLI functionality."""

import json
import logging

import pytest
from click.testing import CliRunner

from tree_clusters import __version__
from tree_clusters.cli import cli, describe_node
from tree_clusters.clusters_logging import LOGGER_NAME
from tree_clusters.navigation.soup import SoupNavigator, parse_document


@pytest.fixture(autouse=True)
def reset_logger(monkeypatch):
    """Keep CLI logging setup from leaking into other tests."""
    monkeypatch.delenv("TREE_CLUSTERS_TOO_FAR", raising=False)
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def runner():
    return CliRunner()


class TestMainCLI:
    """Test main CLI group functionality."""

    def test_cli_help(self, runner):
        """Test CLI help output."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "group document nodes by structural proximity" in result.output

    def test_cli_version(self, runner):
        """Test CLI version option."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestClusterCommand:
    """Tests for the cluster command."""

    def test_text_output(self, runner, article_file):
        """Test human-readable cluster listing."""
        result = runner.invoke(
            cli, ["cluster", str(article_file), "-s", "p, span", "--too-far", "2", "-q"]
        )
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == "4 nodes, 2 clusters"
        assert lines[1] == "Cluster 0 (1 nodes)"
        assert lines[2] == "  <span> elsewhere"
        assert lines[3] == "Cluster 1 (3 nodes)"
        assert lines[4:] == ["  <p> two", "  <p> one", "  <p> three"]

    def test_json_output(self, runner, article_file):
        """Test JSON cluster output."""
        result = runner.invoke(
            cli,
            ["cluster", str(article_file), "-s", "p, span", "--too-far", "2", "--json", "-q"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total_items"] == 4
        assert data["merges"] == 2
        assert data["final_distance"] == 4
        assert [c["size"] for c in data["clusters"]] == [1, 3]
        assert data["clusters"][0]["nodes"] == [{"tag": "span", "text": "elsewhere"}]

    def test_threshold_from_config(self, runner, article_file, tmp_path):
        """Test that the config file supplies the threshold."""
        config = tmp_path / "clusters.json"
        config.write_text(json.dumps({"too_far": 100}))
        result = runner.invoke(
            cli,
            ["cluster", str(article_file), "-s", "p, span", "--config", str(config), "--json", "-q"],
        )
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["clusters"]) == 1

    def test_missing_threshold(self, runner, article_file):
        """Test that a missing threshold is a usage error."""
        result = runner.invoke(cli, ["cluster", str(article_file), "-s", "p", "-q"])
        assert result.exit_code == 2
        assert "No clustering threshold given" in result.output

    def test_invalid_selector(self, runner, article_file):
        """Test that a malformed selector is reported."""
        result = runner.invoke(
            cli, ["cluster", str(article_file), "-s", "p[", "--too-far", "2", "-q"]
        )
        assert result.exit_code == 2
        assert "Invalid selector" in result.output

    def test_quiet_and_verbose(self, runner, article_file):
        """Test that --quiet and --verbose conflict."""
        result = runner.invoke(
            cli, ["cluster", str(article_file), "-s", "p", "--too-far", "2", "-q", "-v"]
        )
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_missing_document(self, runner, tmp_path):
        """Test that click rejects a missing document."""
        result = runner.invoke(
            cli, ["cluster", str(tmp_path / "nope.html"), "-s", "p", "--too-far", "2"]
        )
        assert result.exit_code == 2

    def test_no_matches(self, runner, article_file):
        """Test clustering when the selector matches nothing."""
        result = runner.invoke(
            cli, ["cluster", str(article_file), "-s", "table", "--too-far", "2", "-q"]
        )
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["0 nodes, 0 clusters"]


    def test_unknown_parser(self, runner, article_file):
        """Test that an unavailable parser is a formatted usage error."""
        result = runner.invoke(
            cli,
            ["cluster", str(article_file), "-s", "p", "--too-far", "2", "-q", "--parser", "nosuchparser"],
        )
        assert result.exit_code == 2
        assert isinstance(result.exception, SystemExit)
        assert "Parser 'nosuchparser' is not available" in result.output
        assert "Suggestion" in result.output

    def test_log_file(self, runner, article_file, tmp_path):
        """Test that --log-file records the clustering run."""
        log_file = tmp_path / "run.log"
        result = runner.invoke(
            cli,
            [
                "cluster",
                str(article_file),
                "-s",
                "p, span",
                "--too-far",
                "2",
                "-q",
                "--log-file",
                str(log_file),
            ],
        )
        assert result.exit_code == 0
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.close()
        assert "Clustered 4 nodes into 2 clusters" in log_file.read_text()


class TestUnexpectedErrors:
    """Tests for errors outside the package's own hierarchy."""

    def test_formatted_not_raised(self, runner, article_file, monkeypatch):
        """Test that an unexpected exception becomes an error message."""

        def broken(markup, parser):
            raise RuntimeError("parser crashed")

        monkeypatch.setattr("tree_clusters.cli.parse_document", broken)
        result = runner.invoke(
            cli, ["cluster", str(article_file), "-s", "p", "--too-far", "2", "-q"]
        )
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error: parser crashed" in result.output


class TestDistanceCommand:
    """Tests for the distance command."""

    def test_distance(self, runner, article_file):
        """Test the distance between the first matches."""
        result = runner.invoke(cli, ["distance", str(article_file), "p", "span", "-q"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "6"

    def test_no_match(self, runner, article_file):
        """Test a selector that matches nothing."""
        result = runner.invoke(cli, ["distance", str(article_file), "p", "table", "-q"])
        assert result.exit_code == 2
        assert "matched nothing" in result.output


class TestDescribeNode:
    """Tests for node descriptions."""

    def test_truncates_text(self):
        """Test that long text is shortened."""
        p = parse_document(f"<p>{'word ' * 40}</p>").find("p")
        described = describe_node(SoupNavigator(), p)
        assert described["tag"] == "p"
        assert len(described["text"]) == 60
        assert described["text"].endswith("...")

    def test_collapses_whitespace(self):
        """Test that text is normalized."""
        p = parse_document("<p>a\n   <b>b</b>\tc</p>").find("p")
        assert describe_node(SoupNavigator(), p)["text"] == "a b c"
