"""
Configuration module for byzershell.

Copyright (c) 2025 Firefly Software Solutions Inc.
Licensed under the Apache License, Version 2.0 (the "License");
"""

from .shell_config import (
    DEFAULT_KEYWORDS,
    ByzerShellConfig,
    ConfigurationManager,
    EngineConfig,
    LoggingConfig,
    ShellConfig,
    parse_properties,
    properties_to_config_data,
)

__all__ = [
    # Main configuration classes
    "ByzerShellConfig",
    "EngineConfig",
    "ShellConfig",
    "LoggingConfig",
    "ConfigurationManager",
    # '.mlsql.config' support
    "parse_properties",
    "properties_to_config_data",
    "DEFAULT_KEYWORDS",
]
