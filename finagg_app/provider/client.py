"""HTTP POST exchange with the upstream tabular data provider."""

import json
import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

import structlog

from ..config.defaults import ProviderParams
from ..data.models import WireResponse
from ..errors import ConfigurationError, MalformedPayloadError, ProtocolError, TransportError

logger = structlog.get_logger(__name__)


class ProviderClient:
    """
    Performs one request/response exchange per call against the provider.

    Each exchange runs on a one-shot worker thread. The caller waits at most
    ``timeout_seconds`` of wall-clock time; once the deadline passes the
    exchange is cancelled, the caller gets a TransportError, and the socket
    timeout bounds how long the abandoned worker can linger.
    """

    def __init__(self, config: ProviderParams):
        self.config = config

        parsed = urlparse(config.api_url)
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(f"Invalid provider URL: {config.api_url}", setting="api_url")

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if no access token is configured."""
        if not self.config.token:
            raise ConfigurationError(
                "Provider token is not configured; set TUSHARE_TOKEN",
                setting="token"
            )

    def execute(self, api_name: str, params: dict[str, Any],
                fields: Optional[str] = None) -> WireResponse:
        """
        Execute one provider exchange.

        Args:
            api_name: Provider endpoint name, e.g. "income"
            params: Endpoint parameters
            fields: Comma-separated field filter, omitted when None

        Returns:
            The provider reply with code 0

        Raises:
            ConfigurationError: If the token is missing (before any I/O)
            TransportError: On network failure or deadline expiry
            ProtocolError: On non-2xx HTTP status or non-zero provider code
            MalformedPayloadError: If the reply body is not a JSON object
        """
        self.ensure_configured()

        request_body: dict[str, Any] = {
            "api_name": api_name,
            "token": self.config.token,
            "params": params,
        }
        if fields:
            request_body["fields"] = fields

        logger.debug("Provider request", api_name=api_name, params=params)

        status, raw = self._run_with_deadline(api_name, json.dumps(request_body).encode("utf-8"))

        if not 200 <= status < 300:
            logger.warning("Provider HTTP error", api_name=api_name, status=status)
            raise ProtocolError(f"Provider request failed: HTTP {status}", status_code=status)

        try:
            body = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise MalformedPayloadError(f"Provider reply is not valid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(f"Provider reply is not JSON: {e}") from e

        if not isinstance(body, dict):
            raise MalformedPayloadError("Provider reply must be a JSON object")

        response = WireResponse.from_json(body)

        if not response.ok:
            message = response.msg or "unknown error"
            logger.warning(
                "Provider returned error code",
                api_name=api_name,
                code=response.code,
                msg=message
            )
            raise ProtocolError(
                f"Provider error: {message}",
                provider_code=response.code,
                provider_message=message
            )

        return response

    def _run_with_deadline(self, api_name: str, data: bytes) -> tuple[int, bytes]:
        cancelled = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"provider-{api_name}")
        future = executor.submit(self._exchange, api_name, data, cancelled)

        try:
            return future.result(timeout=self.config.timeout_seconds)
        except FutureTimeoutError:
            cancelled.set()
            future.cancel()
            logger.warning(
                "Provider request timed out",
                api_name=api_name,
                timeout_seconds=self.config.timeout_seconds
            )
            raise TransportError(
                f"Provider request timed out after {self.config.timeout_seconds}s",
                endpoint=api_name
            ) from None
        finally:
            executor.shutdown(wait=False)

    def _exchange(self, api_name: str, data: bytes,
                  cancelled: threading.Event) -> tuple[int, bytes]:
        """Blocking HTTP POST; returns (status, raw body)."""
        req = Request(
            self.config.api_url,
            data=data,
            headers={
                "Content-Type": "application/json",
                "User-Agent": "finagg-app/0.1",
            },
            method="POST"
        )

        try:
            with urlopen(req, timeout=self.config.timeout_seconds) as response:
                if cancelled.is_set():
                    return 0, b""
                return response.getcode(), response.read()

        except HTTPError as e:
            return e.code, b""

        except (OSError, URLError, socket.timeout) as e:
            logger.warning("Provider network error", api_name=api_name, error=str(e))
            raise TransportError(f"Network error: {e}", endpoint=api_name) from e
