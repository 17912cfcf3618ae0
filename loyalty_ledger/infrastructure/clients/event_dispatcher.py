"""HTTP implementation of EventDispatcher."""

import asyncio
from typing import Any, Dict

import httpx
import structlog

from loyalty_ledger.core.config import settings
from loyalty_ledger.core.metrics import (
    track_event_delivery_latency,
    record_event_delivery_retry,
    record_event_delivery_success,
    record_event_delivery_failure,
)
from loyalty_ledger.domain.events import DomainEvent
from loyalty_ledger.domain.interfaces import EventDispatcher

logger = structlog.get_logger(__name__)


class HttpEventDispatcher(EventDispatcher):
    """
    Delivers domain events to a webhook.

    Sends JSON payloads with retry logic and exponential backoff. Delivery
    is best-effort: failures are logged and reported as False.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float = 0.1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url or settings.event_webhook_url
        self._timeout = timeout or settings.event_webhook_timeout
        self._max_retries = max_retries or settings.event_webhook_max_retries
        self._backoff_base = backoff_base
        self._transport = transport

    async def dispatch(self, event: DomainEvent) -> bool:
        return await self._send(event.to_dict(), event.event_type)

    async def _send(self, payload: Dict[str, Any], event_type: str) -> bool:
        """
        Send a payload with retry logic.

        Uses exponential backoff: 0.1s, 0.2s, 0.4s, ...
        """
        for attempt in range(self._max_retries):
            try:
                with track_event_delivery_latency():
                    async with httpx.AsyncClient(
                        timeout=self._timeout,
                        transport=self._transport,
                    ) as client:
                        response = await client.post(
                            self._url,
                            json=payload,
                            headers={"Content-Type": "application/json"},
                        )

                        if response.status_code < 400:
                            logger.info(
                                "event_delivered",
                                event_type=event_type,
                                status_code=response.status_code,
                            )
                            record_event_delivery_success(event_type)
                            return True

                        logger.warning(
                            "event_delivery_failed",
                            event_type=event_type,
                            status_code=response.status_code,
                            attempt=attempt + 1,
                            response=response.text[:200],
                        )

            except httpx.TimeoutException:
                logger.warning(
                    "event_delivery_timeout",
                    event_type=event_type,
                    attempt=attempt + 1,
                )
            except Exception as e:
                logger.error(
                    "event_delivery_error",
                    event_type=event_type,
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Record retry and exponential backoff
            if attempt < self._max_retries - 1:
                record_event_delivery_retry()
                delay = 2 ** attempt * self._backoff_base
                await asyncio.sleep(delay)

        logger.error(
            "event_delivery_exhausted_retries",
            event_type=event_type,
            max_retries=self._max_retries,
        )
        record_event_delivery_failure(event_type)
        return False
