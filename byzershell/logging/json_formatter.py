"""
JSON log formatters for shell records and forwarded engine output.
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
import logging
from datetime import datetime

SHELL_LOG_PREFIX = "byzershell::shell::log"
ENGINE_LOG_PREFIX = "byzershell::engine::log"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class ByzerShellJSONFormatter(logging.Formatter):
    """
    One JSON object per line, tagged with a source prefix.

    Values passed through ``extra`` (for example the ``stream`` of an engine
    line) are added as top-level keys unless ``include_extra`` is False.
    """

    prefix = SHELL_LOG_PREFIX

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "prefix": self.prefix,
            "thread": record.threadName,
        }
        if record.funcName and record.funcName != "<module>":
            entry["function"] = record.funcName

        if self.include_extra:
            entry.update(
                (key, value)
                for key, value in vars(record).items()
                if key not in _RECORD_ATTRIBUTES
                and not key.startswith("_")
                and value not in (None, "")
            )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, separators=(",", ":"), default=str)


class ShellLogFormatter(ByzerShellJSONFormatter):
    """Formatter for records from shell components."""


class EngineLogFormatter(ByzerShellJSONFormatter):
    """Formatter for lines captured from the engine process."""

    prefix = ENGINE_LOG_PREFIX
