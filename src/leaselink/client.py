from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests

from . import __version__
from .config import LeaseLinkConfig
from .enums import LogLevel
from .exceptions import LeaseLinkApiException
from .loggers import Context, LogSink, StandardLogger, emit

REDACTED = "***"
SECRET_KEYS = ("ApiKey", "Token")


class LeaseLinkApiClient:
    """
    HTTP client for the LeaseLink API.

    Features:
    - Persistent session with default headers
    - JSON POST with optional bearer token
    - Token acquisition (no caching; every call issues a new request)
    - Lifecycle logging to a pluggable sink

    Requests are never retried. The timeout comes from `config.timeout`.
    """

    def __init__(
        self,
        config: LeaseLinkConfig,
        logger: Optional[LogSink] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self._logger: LogSink = logger if logger is not None else StandardLogger()

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": f"LeaseLinkPython/{__version__}",
                "Accept": "application/json",
            }
        )

    @property
    def logger(self) -> LogSink:
        return self._logger

    @logger.setter
    def logger(self, sink: LogSink) -> None:
        self._logger = sink

    def _log(self, level: LogLevel, message: str, context: Context = None) -> None:
        emit(self._logger, level, message, context)

    # ---------------------------------------------------
    # Core request method
    # ---------------------------------------------------
    def call(
        self,
        endpoint: str,
        data: Mapping[str, Any],
        token: Optional[str] = None,
    ) -> Any:
        """
        POST `data` as JSON to the API and return the decoded body.

        Raises LeaseLinkApiException for transport errors, non-2xx statuses
        (carrying the server's "errors" when present) and bodies that are
        not JSON.
        """
        url = self.config.api_url + endpoint
        self._log(LogLevel.INFO, "Making API call", {"endpoint": endpoint, "url": url})

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.session.post(
                url,
                json=dict(data),
                headers=headers,
                timeout=self.config.timeout,
            )
        except requests.Timeout as e:
            self._log(LogLevel.ERROR, "API request timed out", {"url": url, "error": str(e)})
            raise LeaseLinkApiException(f"Request timed out calling {url}") from e
        except requests.RequestException as e:
            self._log(LogLevel.ERROR, "API request failed", {"url": url, "error": str(e)})
            raise LeaseLinkApiException(f"Request failed calling {url}") from e

        status = response.status_code
        success = 200 <= status < 300
        if success:
            self._log(LogLevel.INFO, "API call successful", {"status_code": status})

        body = self._parse_json(response)
        self._log(
            LogLevel.DEBUG,
            "HTTP response",
            {
                "code": status,
                "body": _redact(body) if body is not None else response.text,
                "data": _redact(data),
                "url": url,
            },
        )

        if not success:
            self._log(
                LogLevel.ERROR,
                "API request failed",
                {
                    "url": url,
                    "status_code": status,
                    "response": _redact(body),
                    "request": _redact(data),
                },
            )
            errors = body.get("errors") if isinstance(body, dict) else None
            if errors is None:
                errors = [f"HTTP request failed with status {status}"]
            raise LeaseLinkApiException(errors, status_code=status)

        self._log(LogLevel.DEBUG, "JSON response", {"response": _redact(body)})

        if body is None:
            self._log(
                LogLevel.ERROR,
                "Invalid JSON response",
                {"url": url, "response": response.text},
            )
            raise LeaseLinkApiException("Invalid JSON response", status_code=status)

        return body

    @staticmethod
    def _parse_json(response: requests.Response) -> Any:
        """Decode the body, returning None when it is empty or not JSON."""
        try:
            return response.json()
        except ValueError:
            return None

    # ---------------------------------------------------
    # Authentication
    # ---------------------------------------------------
    def get_token(self) -> Dict[str, Any]:
        """
        Request a fresh bearer token.

        Returns {"Token": ..., "ValidTo": ...}. Tokens are not cached;
        tracking their lifetime is up to the caller.
        """
        self._log(LogLevel.INFO, "Requesting new token")

        try:
            result = self.call("/GetToken", {"ApiKey": self.config.api_key})
            if not isinstance(result, dict):
                result = {}

            if result.get("Token") is not None:
                self._log(
                    LogLevel.INFO,
                    "Token acquired successfully",
                    {"valid_to": result.get("ValidTo", "unknown")},
                )

            if result.get("Token") is None or result.get("ValidTo") is None:
                self._log(LogLevel.ERROR, "Invalid token response", {"response": _redact(result)})
                raise LeaseLinkApiException("Invalid token response")

            return {"Token": result["Token"], "ValidTo": result["ValidTo"]}
        except Exception as e:
            self._log(LogLevel.ERROR, "Token acquisition failed", {"error": str(e)})
            raise


def _redact(data: Any) -> Any:
    if not isinstance(data, Mapping):
        return data
    return {k: (REDACTED if k in SECRET_KEYS else v) for k, v in data.items()}
