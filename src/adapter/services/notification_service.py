"""Notification Service Implementations

Provides concrete implementations for announcing issued discount codes.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import DiscountIssuedNotice, NotificationService

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs notices

    Useful for development and testing, or as a fallback.
    """

    async def send_discount_issued(self, notice: DiscountIssuedNotice) -> bool:
        """
        Log the issued code

        Args:
            notice: DiscountIssuedNotice to report

        Returns:
            Always True (logging never fails)
        """
        valid_until = notice.valid_until.isoformat() if notice.valid_until else "open-ended"
        logger.info(
            f"[DISCOUNT ISSUED] Subject: {notice.subject_id}, "
            f"Family: {notice.family_id}, "
            f"Code: {notice.code}, "
            f"Rule: {notice.rule_name}, "
            f"Value: {notice.value} ({notice.discount_kind}), "
            f"Valid until: {valid_until}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that posts notices to an HTTP webhook

    The receiving side (mail, push) owns delivery.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST notices to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_discount_issued(self, notice: DiscountIssuedNotice) -> bool:
        """
        Send notice via webhook

        Args:
            notice: DiscountIssuedNotice to deliver

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "discount_issued",
            "code_id": notice.code_id,
            "code": notice.code,
            "subject_id": notice.subject_id,
            "family_id": notice.family_id,
            "rule_name": notice.rule_name,
            "discount_kind": notice.discount_kind,
            "value": str(notice.value),
            "valid_until": notice.valid_until.isoformat() if notice.valid_until else None,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for code {notice.code_id} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification for code {notice.code_id}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_discount_issued(self, notice: DiscountIssuedNotice) -> bool:
        """
        Send notice to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_discount_issued(notice):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
