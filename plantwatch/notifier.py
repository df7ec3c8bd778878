"""Webhook delivery of the current actionable insights."""

import logging
import time
from collections.abc import Sequence
from datetime import UTC, datetime

import requests

from .config import NOTIFY_LEVELS, AlertsConfig, WebhookConfig
from .insights import generate_insights, insight_to_dict
from .models import Facility, Insight

logger = logging.getLogger(__name__)


def _level(insight_type: str) -> int:
    """Urgency of an insight type; types outside NOTIFY_LEVELS are never sent."""
    try:
        return NOTIFY_LEVELS.index(insight_type)
    except ValueError:
        return -1


def select_insights(insights: Sequence[Insight], min_level: str) -> list[Insight]:
    """Keep call-outs at or above a webhook's minimum level.

    The system-health summary is excluded; it is sent as the payload's
    ``summary`` field instead.
    """
    threshold = NOTIFY_LEVELS.index(min_level)
    return [i for i in insights if i.id != "system-health" and _level(i.type) >= threshold]


class InsightNotifier:
    """Posts insight digests to the configured webhooks."""

    def __init__(self, config: AlertsConfig, max_retries: int = 3, retry_delay: int = 2):
        """Initialize notifier with configuration.

        Args:
            config: Alerts configuration with webhooks
            max_retries: Maximum number of retry attempts for failed webhooks
            retry_delay: Base delay in seconds between retries (increases exponentially)
        """
        self._config = config
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    def notify(self, facilities: Sequence[Facility]) -> dict[str, bool]:
        """Send the current insights to every enabled webhook.

        Webhooks with nothing at or above their level are skipped.

        Returns:
            Dictionary mapping webhook URL to delivery success.
        """
        insights = generate_insights(facilities)
        summary = insight_to_dict(insights[0])
        results: dict[str, bool] = {}

        for webhook in self._config.webhooks:
            if not webhook.enabled:
                continue

            selected = select_insights(insights, webhook.min_level)
            if not selected:
                logger.debug("No insights at level %s for %s, skipping", webhook.min_level, webhook.url)
                continue

            payload = {
                "event": "insights",
                "summary": summary,
                "insights": [insight_to_dict(i) for i in selected],
                "timestamp": datetime.now(UTC).isoformat(),
            }
            results[webhook.url] = self._send(webhook, payload)

        return results

    def _send(self, webhook: WebhookConfig, payload: dict) -> bool:
        """POST a payload with exponential-backoff retries. Never raises."""
        retry_count = 0

        while retry_count <= self._max_retries:
            try:
                response = requests.post(webhook.url, json=payload, timeout=10)
                response.raise_for_status()
                logger.info("Webhook sent successfully to %s", webhook.url)
                return True

            except requests.RequestException as e:
                retry_count += 1
                if retry_count <= self._max_retries:
                    delay = self._retry_delay * (2 ** (retry_count - 1))
                    logger.warning(
                        "Webhook failed for %s (attempt %d/%d, retrying in %ds): %s",
                        webhook.url,
                        retry_count,
                        self._max_retries + 1,
                        delay,
                        e,
                    )
                    time.sleep(delay)
                else:
                    logger.error("Webhook failed for %s after %d attempts: %s", webhook.url, retry_count, e)

        return False

    def test_webhooks(self) -> dict[str, bool]:
        """Send a test payload to every configured webhook.

        Returns:
            Dictionary mapping webhook URL to success status (disabled webhooks report False).
        """
        results: dict[str, bool] = {}
        payload = {
            "event": "test",
            "message": "This is a test notification from plantwatch",
            "timestamp": datetime.now(UTC).isoformat(),
        }

        for webhook in self._config.webhooks:
            if not webhook.enabled:
                results[webhook.url] = False
                continue

            try:
                response = requests.post(webhook.url, json=payload, timeout=10)
                response.raise_for_status()
                results[webhook.url] = True
                logger.info("Test webhook successful: %s", webhook.url)
            except requests.RequestException as e:
                results[webhook.url] = False
                logger.error("Test webhook failed for %s: %s", webhook.url, e)

        return results
