#!/usr/bin/env python3
"""
Unit tests for configuration classes.
"""

"""
Copyright (c) 2025 Firefly Software Solutions Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at:

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import pytest
import json
import yaml
import tempfile
import os
from pathlib import Path
from unittest.mock import patch

from byzershell.config.shell_config import (
    DEFAULT_PLUGIN_CLASSES,
    ByzerShellConfig,
    ConfigurationManager,
    EngineConfig,
    LoggingConfig,
    ShellConfig,
    parse_properties,
    properties_to_config_data,
)


class TestEngineConfig:
    """Test EngineConfig class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = EngineConfig()

        assert config.owner == "admin"
        assert config.memory is None
        assert config.main_class == "streaming.core.StreamingApp"
        assert config.start_port == 9003
        assert config.output_size == 50
        assert config.request_config == {}
        assert config.engine_args == {}
        assert config.is_remote is False

    def test_memory_validation(self):
        """Test heap size validation."""
        EngineConfig(memory="512m")
        EngineConfig(memory="4G")

        with pytest.raises(ValueError, match="memory must end with"):
            EngineConfig(memory="512")

        with pytest.raises(ValueError, match="memory must end with"):
            EngineConfig(memory="2t")

    def test_engine_url_trailing_slash(self):
        """Test the engine URL is stored without a trailing slash."""
        config = EngineConfig(engine_url="http://127.0.0.1:9003/")

        assert config.engine_url == "http://127.0.0.1:9003"
        assert config.is_remote is True

    def test_blank_engine_url_means_local(self):
        """Test a URL of only slashes is treated as unset."""
        config = EngineConfig(engine_url="/")

        assert config.engine_url is None
        assert config.is_remote is False

    def test_port_bounds(self):
        """Test start port validation."""
        with pytest.raises(ValueError):
            EngineConfig(start_port=0)

        with pytest.raises(ValueError):
            EngineConfig(start_port=70000)


class TestShellConfig:
    """Test ShellConfig class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = ShellConfig()

        assert config.prompt == ">> "
        assert config.unclosed_prompt == ".. "
        assert config.history_capacity == 10
        assert config.table_format == "default"
        assert "select" in config.keywords
        assert "!show" in config.keywords

    def test_keywords_are_lowercased(self):
        """Test keywords are normalized to lower case."""
        config = ShellConfig(keywords=["LOAD", "Select"])

        assert config.keywords == ["load", "select"]

    def test_table_format_validation(self):
        """Test table format validation."""
        assert ShellConfig(table_format="Markdown").table_format == "markdown"
        assert ShellConfig(table_format="html-raw").table_format == "html-raw"

        with pytest.raises(ValueError, match="Table format must be one of"):
            ShellConfig(table_format="csv")

    def test_history_capacity_must_be_positive(self):
        """Test history capacity validation."""
        with pytest.raises(ValueError):
            ShellConfig(history_capacity=0)


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = LoggingConfig()

        assert config.level == "WARNING"
        assert config.format == "text"
        assert config.output_file is None
        assert config.enable_engine_logs is True

    def test_level_validation(self):
        """Test log level validation."""
        assert LoggingConfig(level="debug").level == "DEBUG"

        with pytest.raises(ValueError):
            LoggingConfig(level="VERBOSE")

    def test_format_validation(self):
        """Test log format validation."""
        LoggingConfig(format="json")

        with pytest.raises(ValueError):
            LoggingConfig(format="xml")


class TestPropertiesFile:
    """Test '.mlsql.config' parsing."""

    def test_parse_properties(self):
        """Test key=value lines, comments and blank lines."""
        content = """
# engine settings
engine.memory=4g

user.owner = jack
engine.streaming.spark.service=true
spark.sql.query=a=b
"""
        properties = parse_properties(content)

        assert properties == {
            "engine.memory": "4g",
            "user.owner": "jack",
            "engine.streaming.spark.service": "true",
            "spark.sql.query": "a=b",
        }

    def test_parse_properties_invalid_line(self):
        """Test a line without '=' is rejected."""
        with pytest.raises(ValueError, match="Invalid configuration line 2"):
            parse_properties("engine.memory=4g\nnot a property\n")

    def test_properties_to_config_data(self):
        """Test mapping of properties onto engine settings."""
        data = properties_to_config_data(
            {
                "engine.home": "/opt/byzer",
                "engine.memory": "2g",
                "engine.url": "http://remote:9003",
                "engine.streaming.spark.service": "false",
                "engine.spark.executor.memory": "1g",
                "engine.streaming.plugin.clzznames": "my.Plugin",
                "user.owner": "jack",
                "user.timeout": "60",
                "unrelated.key": "ignored",
            }
        )
        engine = data["engine"]

        assert engine["byzer_home"] == "/opt/byzer"
        assert engine["memory"] == "2g"
        assert engine["engine_url"] == "http://remote:9003"
        assert engine["owner"] == "jack"
        assert engine["request_config"] == {"owner": "jack", "timeout": "60"}
        assert engine["engine_args"] == {
            "-streaming.spark.service": "false",
            "-spark.executor.memory": "1g",
            "-streaming.plugin.clzznames": "my.Plugin",
        }

    def test_from_properties_file(self):
        """Test loading a '.mlsql.config' file."""
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / ".mlsql.config"
            config_path.write_text("engine.memory=1g\nuser.owner=bob\n")

            config = ByzerShellConfig.from_file(config_path)

            assert config.engine.memory == "1g"
            assert config.engine.owner == "bob"
            assert config.shell.history_capacity == 10


class TestByzerShellConfig:
    """Test main ByzerShellConfig class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = ByzerShellConfig()

        assert isinstance(config.engine, EngineConfig)
        assert isinstance(config.shell, ShellConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_custom_sub_configs(self):
        """Test configuration with custom sub-configs."""
        config = ByzerShellConfig(
            engine=EngineConfig(owner="jack", output_size=10),
            shell=ShellConfig(prompt="byzer> "),
        )

        assert config.engine.owner == "jack"
        assert config.engine.output_size == 10
        assert config.shell.prompt == "byzer> "

    def test_to_file_json(self):
        """Test saving configuration to JSON file."""
        config = ByzerShellConfig(engine=EngineConfig(owner="jack"))

        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            config_path = f.name

        try:
            config.to_file(config_path)

            with open(config_path) as f:
                data = json.load(f)

            assert data["engine"]["owner"] == "jack"
            assert data["shell"]["history_capacity"] == 10

        finally:
            Path(config_path).unlink()

    def test_to_file_yaml(self):
        """Test saving configuration to YAML file."""
        config = ByzerShellConfig(shell=ShellConfig(history_capacity=25))

        with tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False) as f:
            config_path = f.name

        try:
            config.to_file(config_path)

            with open(config_path) as f:
                data = yaml.safe_load(f)

            assert data["shell"]["history_capacity"] == 25

        finally:
            Path(config_path).unlink()

    def test_from_file_yaml(self):
        """Test loading configuration from YAML file."""
        config_data = {
            "engine": {"engine_url": "http://remote:9003/"},
            "shell": {"table_format": "markdown"},
        }

        with tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False) as f:
            yaml.dump(config_data, f)
            config_path = f.name

        try:
            config = ByzerShellConfig.from_file(config_path)

            assert config.engine.engine_url == "http://remote:9003"
            assert config.shell.table_format == "markdown"

        finally:
            Path(config_path).unlink()

    def test_from_file_nonexistent(self):
        """Test loading from non-existent file."""
        with pytest.raises(FileNotFoundError):
            ByzerShellConfig.from_file("/nonexistent/config.json")

    def test_from_file_invalid_json(self):
        """Test loading from invalid JSON file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            f.write("{ invalid json }")
            config_path = f.name

        try:
            with pytest.raises(ValueError, match="Failed to parse configuration file"):
                ByzerShellConfig.from_file(config_path)

        finally:
            Path(config_path).unlink()

    def test_from_env_basic(self):
        """Test loading configuration from environment variables."""
        env_vars = {
            "BYZERSHELL_HOME": "/opt/byzer",
            "BYZERSHELL_OUTPUT_SIZE": "20",
            "BYZERSHELL_HISTORY_CAPACITY": "3",
            "BYZERSHELL_LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars):
            config = ByzerShellConfig.from_env()

            assert config.engine.byzer_home == "/opt/byzer"
            assert config.engine.output_size == 20
            assert config.shell.history_capacity == 3
            assert config.logging.level == "DEBUG"

    def test_from_env_custom_prefix(self):
        """Test loading with custom environment variable prefix."""
        with patch.dict(os.environ, {"CUSTOM_OWNER": "jack"}):
            config = ByzerShellConfig.from_env(prefix="CUSTOM_")

            assert config.engine.owner == "jack"

    def test_from_env_invalid_values(self):
        """Test handling of invalid environment variable values."""
        with patch.dict(os.environ, {"BYZERSHELL_OUTPUT_SIZE": "not_a_number"}):
            with pytest.raises(ValueError, match="Invalid value for"):
                ByzerShellConfig.from_env()


class TestConfigurationManager:
    """Test ConfigurationManager utility class."""

    def test_create_default_config_file(self):
        """Test creating default configuration file."""
        with tempfile.NamedTemporaryFile(suffix=".yml", delete=False) as f:
            config_path = f.name

        try:
            ConfigurationManager.create_default_config_file(config_path)

            assert Path(config_path).exists()

            config = ByzerShellConfig.from_file(config_path)
            assert config.engine.start_port == 9003

        finally:
            Path(config_path).unlink()

    def test_merge_configs_keeps_unset_values(self):
        """Test later configs only override what they set."""
        base = ByzerShellConfig(engine=EngineConfig(owner="jack", memory="2g"))
        override = ByzerShellConfig(engine=EngineConfig(engine_url="http://remote:9003"))

        merged = ConfigurationManager.merge_configs(base, override)

        assert merged.engine.engine_url == "http://remote:9003"
        assert merged.engine.owner == "jack"
        assert merged.engine.memory == "2g"

    def test_merge_configs_empty(self):
        """Test merging with no configurations."""
        merged = ConfigurationManager.merge_configs()

        assert merged.shell.history_capacity == 10

    def test_load_config_precedence(self):
        """Test configuration precedence (env overrides file)."""
        config_data = {"engine": {"owner": "file-owner", "output_size": 5}}

        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump(config_data, f)
            config_path = f.name

        try:
            with patch.dict(os.environ, {"BYZERSHELL_OWNER": "env-owner"}):
                config = ConfigurationManager.load_config(config_file=config_path)

            assert config.engine.owner == "env-owner"
            assert config.engine.output_size == 5

        finally:
            Path(config_path).unlink()

    def test_load_config_missing_file_uses_defaults(self):
        """Test a missing file falls back to defaults."""
        config = ConfigurationManager.load_config(
            config_file="/nonexistent/.mlsql.config", use_env=False
        )

        assert config.engine.owner == "admin"

    def test_default_plugins_constant(self):
        """Test the default plugin list names the bundled plugins."""
        assert "MLSQLShell" in DEFAULT_PLUGIN_CLASSES
