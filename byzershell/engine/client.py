"""
HTTP client for running scripts on a Byzer engine.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from .errors import EngineRequestError

logger = logging.getLogger(__name__)

PARSER_ERROR_PREFIX = "MLSQL Parser error"
VERSION_QUERY = "!show version;"


def is_parser_error(response_text: str) -> bool:
    """Whether the engine rejected the script while parsing it."""
    return response_text.startswith(PARSER_ERROR_PREFIX)


class EngineClient:
    """Posts scripts to the engine's /run/script endpoint."""

    def __init__(
        self,
        url: str,
        owner: str = "admin",
        request_config: Optional[Dict[str, str]] = None,
        output_size: int = 50,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Args:
            url: Full script endpoint URL
            owner: Script owner
            request_config: Extra form parameters sent with every script
            output_size: Maximum number of result rows
            timeout: Request timeout in seconds, None to wait forever
            client: Preconfigured httpx client
        """
        self.url = url
        self.owner = owner
        self.request_config = dict(request_config or {})
        self.output_size = output_size
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def build_params(self, sql: str) -> Dict[str, str]:
        """Form parameters for one script."""
        params = {
            "sql": sql,
            "owner": self.owner,
            "outputSize": str(self.output_size),
        }
        params.update(self.request_config)
        return params

    def run_script(self, sql: str) -> str:
        """
        Run a script and return the raw response body.

        Raises:
            EngineRequestError: The request could not be sent or answered
        """
        logger.debug(f"Posting script ({len(sql)} chars) to {self.url}")
        try:
            response = self._client.post(self.url, data=self.build_params(sql))
        except httpx.HTTPError as e:
            raise EngineRequestError(f"Fail to execute caused by {e}") from e
        logger.debug(f"Engine answered with status {response.status_code}")
        return response.text

    def fetch_version(self) -> Dict[str, Any]:
        """
        Get the engine version row.

        Raises:
            EngineRequestError: The engine did not return version data
        """
        text = self.run_script(VERSION_QUERY)
        try:
            rows = json.loads(text)
        except json.JSONDecodeError as e:
            raise EngineRequestError(f"Unexpected version response: {text[:200]}") from e
        if isinstance(rows, list) and rows and isinstance(rows[0], dict):
            return rows[0]
        if isinstance(rows, dict):
            return rows
        raise EngineRequestError(f"Unexpected version response: {text[:200]}")

    def wait_until_ready(self, timeout: float = 120.0, interval: float = 1.0) -> Dict[str, Any]:
        """
        Poll the engine until it answers the version query.

        Raises:
            EngineRequestError: The engine was not ready within timeout
        """
        deadline = time.monotonic() + timeout
        while True:
            try:
                return self.fetch_version()
            except EngineRequestError as e:
                if time.monotonic() >= deadline:
                    raise EngineRequestError(
                        f"Engine not ready after {timeout:.0f}s: {e}"
                    ) from e
                logger.debug(f"Engine not ready yet: {e}")
            time.sleep(interval)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "EngineClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
