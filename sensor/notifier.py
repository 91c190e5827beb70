"""
============================================================================
HONEYPOT SENSOR - WEBHOOK NOTIFIER
============================================================================
Delivers NotificationPayloads to the configured webhook as JSON.

Delivery is fire-and-forget:

    notifier.send(payload)     ← returns immediately
        └── asyncio task       ← POST, log outcome, done

There is no retry, no back-off and no queue.  A delivery that fails
(connection error, timeout, non-2xx status) is logged and dropped, and
never surfaces to the listener or heartbeat that produced it.  Ordering
between concurrent sends is not guaranteed.
============================================================================
"""

import asyncio
from typing import Any, Dict, Optional, Set

import httpx

from config.constants import Defaults
from exceptions.sensor import NotificationDeliveryError
from sensor.models import NotificationPayload
from utils.logger import get_logger


logger = get_logger("Notifier")

JSON_HEADERS = {"Content-Type": "application/json"}


class WebhookNotifier:
    """
    Best-effort JSON webhook sender.

    Parameters
    ----------
    url : str
        Destination for every POST.
    timeout : float
        Per-request timeout in seconds.
    transport : httpx.AsyncBaseTransport | None
        Optional transport handed to each client (used by tests).
    """

    def __init__(
        self,
        url: str,
        timeout: float = Defaults.WEBHOOK_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self._timeout = timeout
        self._transport = transport

        # Strong references so the loop doesn't collect running sends
        self._tasks: Set[asyncio.Task] = set()

        self._sent_count = 0
        self._failed_count = 0

    # ------------------------------------------------------------------
    # PUBLIC API
    # ------------------------------------------------------------------

    def send(self, payload: NotificationPayload) -> None:
        """
        Schedule delivery of ``payload`` and return immediately.

        Must be called from within a running event loop.
        """
        task = asyncio.get_running_loop().create_task(
            self._deliver(payload),
            name=f"webhook-{payload.type.value}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def in_flight(self) -> int:
        """Number of deliveries that have not finished yet."""
        return len(self._tasks)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "sent_count": self._sent_count,
            "failed_count": self._failed_count,
            "in_flight": self.in_flight,
        }

    # ------------------------------------------------------------------
    # DELIVERY
    # ------------------------------------------------------------------

    async def _deliver(self, payload: NotificationPayload) -> None:
        """Single POST attempt; every failure ends here."""
        try:
            await self._post(payload.to_dict())
            self._sent_count += 1
            logger.debug(f"✓ {payload.type.value} delivered to webhook")

        except NotificationDeliveryError as e:
            self._failed_count += 1
            logger.warning(f"Failed to send webhook: {e.log_format()}")
        except httpx.TimeoutException:
            self._failed_count += 1
            logger.warning(
                f"Failed to send webhook: timed out after {self._timeout}s"
            )
        except httpx.HTTPError as e:
            self._failed_count += 1
            logger.warning(f"Failed to send webhook: {type(e).__name__}: {e}")
        except Exception as e:
            self._failed_count += 1
            logger.exception(f"Failed to send webhook: {e}")

    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        ) as client:
            response = await client.post(self.url, json=body, headers=JSON_HEADERS)

        if not response.is_success:
            raise NotificationDeliveryError(
                f"Webhook responded with {response.status_code}",
                status_code=response.status_code,
                url=self.url,
            )
        return response
