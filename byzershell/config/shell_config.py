#!/usr/bin/env python3
"""
Configuration classes for the Byzer shell.

Provides configuration management for the engine, the interactive shell
and logging, loaded from YAML/JSON files, '.mlsql.config' key=value files
and environment variables.
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

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_KEYWORDS = [
    "load", "save", "select", "from", "where", "as", "and", "or", "not", "on",
    "join", "left", "right", "inner", "outer", "group", "order", "by", "limit",
    "having", "union", "all", "distinct", "case", "when", "then", "else", "end",
    "options", "overwrite", "append", "errorifexists", "ignore", "partitionby",
    "train", "run", "predict", "register", "set", "connect", "include",
    "!show", "!desc", "!hdfs", "!kill", "!python", "!ray", "!plugin",
]

DEFAULT_PLUGIN_CLASSES = (
    "tech.mlsql.plugins.ds.MLSQLExcelApp,"
    "tech.mlsql.plugins.shell.app.MLSQLShell,"
    "tech.mlsql.plugins.assert.app.MLSQLAssert"
)

# '.mlsql.config' keys whose values are appended to the engine defaults
APPENDING_ENGINE_KEYS = {
    "engine.streaming.plugin.clzznames": "-streaming.plugin.clzznames",
    "engine.streaming.platform_hooks": "-streaming.platform_hooks",
}


class EngineConfig(BaseModel):
    """Configuration for the Byzer engine and how scripts are sent to it."""

    byzer_home: str = Field(default="", description="Byzer installation directory")
    java_home: Optional[str] = Field(
        default=None, description="Java home; resolved from JAVA_HOME or <byzer_home>/jdk8 when unset"
    )
    engine_url: Optional[str] = Field(
        default=None, description="Remote engine URL; a local engine is started when unset"
    )
    owner: str = Field(default="admin", description="Script owner sent with every request")
    memory: Optional[str] = Field(default=None, description="Engine heap size (-Xmx value)")
    main_class: str = Field(
        default="streaming.core.StreamingApp", description="Engine main class"
    )
    start_port: int = Field(
        default=9003, ge=1, le=65535, description="First port tried for a local engine"
    )
    output_size: int = Field(default=50, ge=1, description="Rows returned per statement")
    request_config: Dict[str, str] = Field(
        default_factory=dict, description="Extra form parameters sent with every request"
    )
    engine_args: Dict[str, str] = Field(
        default_factory=dict, description="Engine argument overrides, e.g. '-streaming.master'"
    )
    startup_timeout_seconds: float = Field(
        default=120.0, gt=0, description="Time allowed for a local engine to become ready"
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None, description="HTTP timeout per statement; None waits forever"
    )

    @field_validator("memory")
    @classmethod
    def validate_memory(cls, v):
        if v is not None and not any(v.endswith(suffix) for suffix in ["k", "K", "m", "M", "g", "G"]):
            raise ValueError('memory must end with k/K, m/M, or g/G (e.g., "512m", "2g")')
        return v

    @field_validator("engine_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        if v is not None:
            v = v.rstrip("/")
            if not v:
                return None
        return v

    @property
    def is_remote(self) -> bool:
        return self.engine_url is not None


class ShellConfig(BaseModel):
    """Configuration for the interactive shell."""

    prompt: str = Field(default=">> ", description="Prompt for a new statement")
    unclosed_prompt: str = Field(
        default=".. ", description="Prompt while a statement is not terminated"
    )
    history_capacity: int = Field(default=10, ge=1, description="Statements kept in history")
    keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_KEYWORDS), description="Highlighted keywords"
    )
    table_format: str = Field(default="default", description="default, markdown, html or html-raw")
    progress_tick_seconds: float = Field(
        default=1.0, gt=0, description="Spinner update interval"
    )

    @field_validator("keywords")
    @classmethod
    def lowercase_keywords(cls, v):
        return [k.lower() for k in v]

    @field_validator("table_format")
    @classmethod
    def validate_table_format(cls, v):
        valid_formats = {"default", "markdown", "html", "html-raw"}
        if v.lower() not in valid_formats:
            raise ValueError(f"Table format must be one of: {valid_formats}")
        return v.lower()


class LoggingConfig(BaseModel):
    """Configuration for the logging system."""

    level: str = Field(default="WARNING", description="Logging level")
    format: str = Field(default="text", description="Log format: json or text")
    output_file: Optional[str] = Field(default=None, description="Log output file path")
    max_file_size_mb: int = Field(default=100, ge=1, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=1, description="Number of backup log files to keep")
    enable_engine_logs: bool = Field(
        default=True, description="Forward engine stdout/stderr to the byzershell.engine logger"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v):
        valid_formats = {"json", "text"}
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()


class ByzerShellConfig(BaseModel):
    """Main configuration class for the Byzer shell."""

    engine: EngineConfig = Field(default_factory=EngineConfig, description="Engine configuration")
    shell: ShellConfig = Field(default_factory=ShellConfig, description="Shell configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ByzerShellConfig":
        """Load configuration from a YAML, JSON or '.mlsql.config' file."""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix.lower() in [".yml", ".yaml", ".json"]:
            try:
                if path.suffix.lower() == ".json":
                    data = json.loads(content)
                else:
                    data = yaml.safe_load(content) or {}
            except (json.JSONDecodeError, yaml.YAMLError) as e:
                raise ValueError(f"Failed to parse configuration file: {e}")
            return cls(**data)

        return cls(**properties_to_config_data(parse_properties(content)))

    @classmethod
    def from_env(cls, prefix: str = "BYZERSHELL_") -> "ByzerShellConfig":
        """Load configuration from environment variables.

        Note: This returns a config with only explicitly set environment variables,
        all other values will be the model defaults.
        """
        return cls(**ConfigurationManager._get_env_overrides(prefix))

    def to_file(self, config_path: Union[str, Path], format: str = "auto") -> None:
        """Save configuration to a file."""
        path = Path(config_path)

        if format == "auto":
            format = "json" if path.suffix.lower() == ".json" else "yaml"

        data = self.model_dump()

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False, indent=2)
        else:
            content = json.dumps(data, indent=2)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def parse_properties(content: str) -> Dict[str, str]:
    """
    Parse '.mlsql.config' content.

    Lines are 'key=value'; blank lines and lines starting with '#' are
    skipped, and only the first '=' separates key from value.
    """
    properties = {}
    for lineno, raw_line in enumerate(content.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ValueError(f"Invalid configuration line {lineno}: {raw_line!r}")
        key, value = line.split("=", 1)
        properties[key.strip()] = value.strip()
    return properties


def properties_to_config_data(properties: Dict[str, str]) -> Dict[str, Any]:
    """Map '.mlsql.config' keys onto ByzerShellConfig fields."""
    engine: Dict[str, Any] = {}
    request_config: Dict[str, str] = {}
    engine_args: Dict[str, str] = {}

    for key, value in properties.items():
        if key == "engine.memory":
            engine["memory"] = value
        elif key == "engine.url":
            engine["engine_url"] = value
        elif key == "engine.home":
            engine["byzer_home"] = value

        if key.startswith("engine.spark") or key.startswith("engine.streaming"):
            if key in APPENDING_ENGINE_KEYS:
                engine_args[APPENDING_ENGINE_KEYS[key]] = value
            else:
                engine_args["-" + key[len("engine."):]] = value

        if key.startswith("user."):
            request_config[key[len("user."):]] = value

    if "owner" in request_config:
        engine["owner"] = request_config["owner"]

    engine["request_config"] = request_config
    engine["engine_args"] = engine_args
    return {"engine": engine}


class ConfigurationManager:
    """Utility class for managing configurations."""

    @staticmethod
    def create_default_config_file(path: Union[str, Path], format: str = "yaml") -> None:
        """Create a default configuration file."""
        config = ByzerShellConfig()
        config.to_file(path, format)

    @staticmethod
    def merge_configs(*configs: ByzerShellConfig) -> ByzerShellConfig:
        """Merge multiple configurations, with later configs taking precedence."""
        if not configs:
            return ByzerShellConfig()

        merged_data = configs[0].model_dump()

        for config in configs[1:]:
            config_data = config.model_dump(exclude_unset=True)
            merged_data = ConfigurationManager._deep_merge(merged_data, config_data)

        return ByzerShellConfig(**merged_data)

    @staticmethod
    def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigurationManager._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def load_config(
        config_file: Optional[Union[str, Path]] = None,
        env_prefix: str = "BYZERSHELL_",
        use_env: bool = True,
    ) -> ByzerShellConfig:
        """Load configuration from file and/or environment variables."""

        # Start with base configuration (file or defaults)
        if config_file:
            try:
                base_config = ByzerShellConfig.from_file(config_file)
            except FileNotFoundError:
                base_config = ByzerShellConfig()  # File doesn't exist, use defaults
        else:
            base_config = ByzerShellConfig()

        # Apply environment variable overrides if requested
        if use_env:
            env_overrides = ConfigurationManager._get_env_overrides(env_prefix)
            if env_overrides:
                base_data = base_config.model_dump()
                merged_data = ConfigurationManager._deep_merge(base_data, env_overrides)
                return ByzerShellConfig(**merged_data)

        return base_config

    @staticmethod
    def _get_env_overrides(prefix: str = "BYZERSHELL_") -> Dict[str, Any]:
        """Get only the environment variable overrides that are actually set."""
        config_data = {}

        # Simple environment variable mapping
        env_mappings = {
            f"{prefix}HOME": ("engine.byzer_home", str),
            f"{prefix}ENGINE_URL": ("engine.engine_url", str),
            f"{prefix}OWNER": ("engine.owner", str),
            f"{prefix}ENGINE_MEMORY": ("engine.memory", str),
            f"{prefix}OUTPUT_SIZE": ("engine.output_size", int),
            f"{prefix}HISTORY_CAPACITY": ("shell.history_capacity", int),
            f"{prefix}TABLE_FORMAT": ("shell.table_format", str),
            f"{prefix}LOG_LEVEL": ("logging.level", str),
            f"{prefix}LOG_FORMAT": ("logging.format", str),
            f"{prefix}LOG_FILE": ("logging.output_file", str),
        }

        for env_var, (config_key, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    converted_value = converter(value)
                    # Handle nested keys
                    parts = config_key.split(".")
                    current = config_data
                    for part in parts[:-1]:
                        if part not in current:
                            current[part] = {}
                        current = current[part]
                    current[parts[-1]] = converted_value
                except (ValueError, TypeError) as e:
                    raise ValueError(f"Invalid value for {env_var}: {value} ({e})")

        return config_data
