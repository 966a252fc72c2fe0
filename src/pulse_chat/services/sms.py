"""Delivery of verification codes over SMS.

Two senders are provided: a logging sender used in development, and an
HTTP gateway sender used when ``SMS_GATEWAY_URL`` is configured.
"""

from __future__ import annotations

import logging

import httpx

from pulse_chat.core.settings import settings
from pulse_chat.services.errors import DispatchError

logger = logging.getLogger(__name__)


class SmsSender:
    """Interface for anything able to deliver a verification code."""

    def send_code(self, phone: str, code: str) -> None:
        raise NotImplementedError


class LoggingSmsSender(SmsSender):
    """Write codes to the log instead of sending them."""

    def send_code(self, phone: str, code: str) -> None:
        logger.info("SMS code for %s: %s", phone, code)


class HttpSmsSender(SmsSender):
    """Post codes to an HTTP SMS gateway as JSON."""

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.token = token
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def send_code(self, phone: str, code: str) -> None:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        payload = {"to": phone, "body": f"Your verification code: {code}"}
        try:
            with httpx.Client(
                timeout=httpx.Timeout(self.timeout_seconds),
                transport=self._transport,
            ) as client:
                response = client.post(self.url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("SMS gateway rejected code for %s: %s", phone, exc)
            raise DispatchError() from exc


def get_sms_sender() -> SmsSender:
    """Return the sender selected by configuration."""
    if settings.sms_gateway_url:
        return HttpSmsSender(
            settings.sms_gateway_url,
            token=settings.sms_gateway_token,
            timeout_seconds=settings.sms_timeout_seconds,
        )
    return LoggingSmsSender()
