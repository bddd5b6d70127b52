import logging

import httpx

logger = logging.getLogger(__name__)


class RuntimeTransportError(Exception):
    """The runtime could not be reached or answered with an unreadable body."""


class RuntimeTimeout(RuntimeTransportError):
    """The runtime did not answer within the configured timeout."""


class PistonClient:
    """Thin client for the Piston code execution API."""

    def __init__(self, base_url, timeout=30.0, transport=None):
        self.base_url = base_url
        self.timeout = timeout
        self._client = httpx.Client(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config, transport=None):
        return cls(config['PISTON_URL'], timeout=config['EXECUTION_TIMEOUT'], transport=transport)

    def execute(self, language, version, source_code):
        """Submit a single-file program and return the decoded response body.

        Non-2xx responses are returned as-is: Piston reports request problems
        through a top-level ``message`` field.
        """
        payload = {
            "language": language,
            "version": version,
            "files": [{"content": source_code}],
        }

        try:
            response = self._client.post("/execute", json=payload)
        except httpx.TimeoutException as e:
            logger.warning(f"Piston request for {language} {version} timed out after {self.timeout}s")
            raise RuntimeTimeout(str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"Piston request for {language} {version} failed: {e}")
            raise RuntimeTransportError(str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Piston returned a non-JSON body (HTTP {response.status_code})")
            raise RuntimeTransportError("invalid response body") from e

        if not isinstance(data, dict):
            raise RuntimeTransportError("invalid response body")

        return data

    def health_check(self):
        """Check if the runtime list endpoint answers."""
        try:
            response = self._client.get("/runtimes")
            return response.status_code == 200
        except httpx.HTTPError:
            return False
