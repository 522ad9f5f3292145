"""Sender strategy base classes.

A sender strategy delivers message content to recipients on one
platform. Strategies that can reach many recipients in one logical
operation derive from ``MassSenderStrategy`` and advertise it through
``supports_mass_send``; the dispatch service branches on that flag only.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Iterable, List, Optional, Sequence

import httpx

from ....config.constants import MessagePlatform

logger = logging.getLogger(__name__)

DEFAULT_PLATFORM_TIMEOUT = 10.0


@dataclass(frozen=True)
class SendResult:
    """Outcome of a delivery attempt."""

    success: bool
    status_code: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def failure(cls, message: str, status_code: Optional[int] = None) -> "SendResult":
        return cls(success=False, status_code=status_code, message=message)


def combine_results(results: Sequence[SendResult]) -> SendResult:
    """AND-combine per-recipient results into a single outcome."""
    delivered = sum(1 for result in results if result.success)
    total = len(results)
    return SendResult(
        success=total > 0 and delivered == total,
        message=f"{delivered}/{total} delivered",
    )


async def gather_results(sends: Iterable[Awaitable[SendResult]]) -> List[SendResult]:
    """Wait for every send to settle, then re-raise the first unexpected error."""
    outcomes = await asyncio.gather(*sends, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return list(outcomes)


class SenderStrategy(ABC):
    """Delivers messages to a single platform.

    Ordinary delivery failures (error status, rejection by the platform,
    timeouts, transport errors, missing credentials) are reported as
    ``SendResult(success=False)`` and never raised.
    """

    platform: MessagePlatform
    supports_mass_send: bool = False

    def __init__(
        self,
        timeout: float = DEFAULT_PLATFORM_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self._http_client = http_client

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the credentials needed to reach the platform are present."""
        pass

    @abstractmethod
    async def send_one(self, recipient: str, content: str, file_url: Optional[str] = None) -> SendResult:
        """Deliver content to one recipient."""
        pass

    def _not_configured(self) -> SendResult:
        return SendResult.failure(f"{self.platform.value} credentials not configured")

    @asynccontextmanager
    async def _client(self):
        if self._http_client is not None:
            yield self._http_client
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                yield client

    def _is_accepted(self, body: Dict[str, Any]) -> bool:
        """Platform-level acceptance check on a 2xx response body."""
        return True

    def _error_message(self, body: Dict[str, Any]) -> Optional[str]:
        """Extract the platform's error description from a response body."""
        return body.get("message")

    async def _post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> SendResult:
        """POST a JSON payload and map the response to a SendResult."""
        try:
            async with self._client() as client:
                response = await client.post(url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.TimeoutException:
            logger.warning(f"{self.platform.value} API timeout after {self.timeout}s")
            return SendResult.failure(f"{self.platform.value} API timeout")
        except httpx.HTTPError as e:
            logger.warning(f"{self.platform.value} API request failed: {e.__class__.__name__}")
            return SendResult.failure(f"{self.platform.value} API request failed")

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_success and self._is_accepted(body):
            return SendResult(success=True, status_code=response.status_code, message="delivered")

        error = self._error_message(body) or f"HTTP {response.status_code}"
        logger.warning(f"{self.platform.value} API rejected message: {error}")
        return SendResult.failure(error, status_code=response.status_code)


class MassSenderStrategy(SenderStrategy):
    """Sender strategy able to reach several recipients in one operation."""

    supports_mass_send = True

    async def send_many(
        self,
        recipients: List[str],
        content: str,
        file_url: Optional[str] = None,
    ) -> SendResult:
        """Deliver content to every recipient concurrently and combine the outcomes."""
        results = await gather_results(self.send_one(recipient, content, file_url) for recipient in recipients)
        combined = combine_results(results)
        logger.info(f"{self.platform.value} mass send: {combined.message}")
        return combined
