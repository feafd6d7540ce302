#!/usr/bin/env python3
"""
Tests for loading parser limits from config files.

This module tests JSON and YAML limits files and how the loaded limits
bound a parser instance.
"""

import json
import os
import tempfile
import textwrap

import pytest

from arena_argparser import ArgParser, Cell, ErrorKind, ParserLimits, load_limits


def write_temp(content: str, suffix: str) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False) as f:
        f.write(content)
        return f.name


class TestLimitsFiles:
    """Test suite for limits file loading."""

    def test_json_limits(self):
        config_path = write_temp(
            json.dumps({"max_params": 3, "arena_size": 512}), ".json"
        )
        try:
            limits = load_limits(config_path)
            assert limits == ParserLimits(max_params=3, arena_size=512)
            assert limits.max_error_message == 256  # default value
        finally:
            os.unlink(config_path)

    def test_yaml_limits(self):
        config_content = textwrap.dedent("""
            max_params: 8
            max_error_message: 64
            """).strip()
        config_path = write_temp(config_content, ".yaml")
        try:
            limits = load_limits(config_path)
            assert limits.max_params == 8
            assert limits.max_error_message == 64
            assert limits.arena_size == 0x1000  # default value
        finally:
            os.unlink(config_path)

    def test_empty_yaml_gives_defaults(self):
        config_path = write_temp("", ".yml")
        try:
            assert load_limits(config_path) == ParserLimits()
        finally:
            os.unlink(config_path)

    def test_loaded_limits_bound_the_parser(self):
        config_path = write_temp(json.dumps({"max_params": 3}), ".json")
        try:
            parser = ArgParser("prog", limits=load_limits(config_path))
        finally:
            os.unlink(config_path)

        assert parser.add_flag(Cell(), "-a").is_ok()
        result = parser.add_flag(Cell(), "-b")
        assert result.unwrap_err().kind is ErrorKind.CAPACITY_EXCEEDED

    def test_unknown_key(self):
        config_path = write_temp(json.dumps({"max_parms": 3}), ".json")
        try:
            with pytest.raises(ValueError, match="Unknown limit"):
                load_limits(config_path)
        finally:
            os.unlink(config_path)

    def test_wrong_value_type(self):
        config_path = write_temp("max_params: many\n", ".yaml")
        try:
            with pytest.raises(TypeError, match="max_params"):
                load_limits(config_path)
        finally:
            os.unlink(config_path)

    def test_non_positive_value(self):
        with pytest.raises(ValueError, match="must be positive"):
            ParserLimits(arena_size=0)

    def test_not_a_mapping(self):
        config_path = write_temp(json.dumps([1, 2, 3]), ".json")
        try:
            with pytest.raises(ValueError, match="mapping"):
                load_limits(config_path)
        finally:
            os.unlink(config_path)

    def test_invalid_json(self):
        config_path = write_temp("{not json", ".json")
        try:
            with pytest.raises(ValueError, match="Invalid JSON file"):
                load_limits(config_path)
        finally:
            os.unlink(config_path)

    def test_unsupported_extension(self):
        config_path = write_temp("max_params = 3", ".toml")
        try:
            with pytest.raises(ValueError, match="Unsupported file format"):
                load_limits(config_path)
        finally:
            os.unlink(config_path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_limits("/nonexistent/limits.yaml")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
