"""Tests for the random range helpers, logging setup and config loading."""

import json
import logging

import pytest

from utils import load_config, make_rng, random_sign, setup_logging, uniform


class TestUniform:
    """Tests for uniform() and random_sign()."""

    def test_values_stay_in_half_open_interval(self):
        rng = make_rng(7)
        values = [uniform(2.0, 4.0, rng) for _ in range(2000)]
        assert all(2.0 <= v < 4.0 for v in values)
        # Spread across the interval rather than stuck at one end.
        assert min(values) < 2.2
        assert max(values) > 3.8

    def test_collapsed_range_returns_the_constant(self):
        assert uniform(100, 100, make_rng(0)) == 100

    def test_reversed_range_is_tolerated(self):
        rng = make_rng(3)
        values = [uniform(0, -50, rng) for _ in range(200)]
        assert all(-50 < v <= 0 for v in values)

    def test_same_seed_gives_same_sequence(self):
        first = [uniform(0, 1, make_rng(42)) for _ in range(3)]
        second = [uniform(0, 1, make_rng(42)) for _ in range(3)]
        assert first == second

    def test_default_generator_is_used_without_rng(self):
        assert 0 <= uniform(0, 1) < 1

    def test_random_sign_produces_both_signs(self):
        rng = make_rng(11)
        signs = {random_sign(rng) for _ in range(100)}
        assert signs == {1, -1}


class TestLoggingAndConfig:
    """Tests for setup_logging() and load_config()."""

    def test_setup_logging_writes_to_rotating_file(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        log_file = tmp_path / "logs" / "run.log"
        try:
            setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
            logging.info("hello from the test")
            for handler in root.handlers:
                handler.flush()
            assert root.level == logging.DEBUG
            assert "hello from the test" in log_file.read_text()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_load_config_reads_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"animation": {"num_objects": 3}}))
        assert load_config(str(path)) == {"animation": {"num_objects": 3}}

    def test_load_config_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.json"))

    def test_load_config_bad_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_config(str(path))
