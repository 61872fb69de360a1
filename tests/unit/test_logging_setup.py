"""
Unit tests for logging_setup.py module.
"""

import io
import json

from retireplan.logging_setup import configure_logging


class TestConfigureLogging:
    """Test configure_logging()."""

    def test_json_lines(self, capsys):
        logger = configure_logging("INFO")
        logger.info("calculation.completed", n_sims=100)
        line = capsys.readouterr().out.strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "calculation.completed"
        assert entry["service"] == "retireplan"
        assert entry["level"] == "info"
        assert entry["n_sims"] == 100
        assert "timestamp" in entry

    def test_level_filter(self, capsys):
        logger = configure_logging("WARNING")
        logger.info("hidden")
        logger.warning("shown")
        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_custom_stream(self, capsys):
        stream = io.StringIO()
        logger = configure_logging("INFO", stream=stream)
        logger.info("calculation.completed")
        assert json.loads(stream.getvalue().splitlines()[-1])["event"] == "calculation.completed"
        assert capsys.readouterr().out == ""
