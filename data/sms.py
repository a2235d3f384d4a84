"""
SMS delivery via Twilio
"""

import asyncio
import logging
from collections import deque

from twilio.base.exceptions import TwilioException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client as TwilioClient

from config.settings import settings
from utils.errors import DeliveryError
from utils.helpers import to_e164

logger = logging.getLogger(__name__)


class TwilioSMSSender:
    """Sends alert messages through the Twilio Messages API"""

    ACCEPTED_STATUSES = ("accepted", "queued", "sending", "sent", "delivered")

    def __init__(self, account_sid: str = None, auth_token: str = None, from_number: str = None,
                 default_country_code: str = None, client: TwilioClient = None):
        self.from_number = from_number or settings.TWILIO_FROM_NUMBER
        self.default_country_code = default_country_code or settings.DEFAULT_COUNTRY_CODE
        self.client = client
        if self.client is None:
            account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
            auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
            if account_sid and auth_token:
                http_client = TwilioHttpClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
                self.client = TwilioClient(account_sid, auth_token, http_client=http_client)
                logger.info("Twilio SMS delivery enabled")

    async def send(self, message: str, phone: str) -> str:
        """
        Send one SMS

        Returns:
            Twilio message SID

        Raises:
            DeliveryError: not configured, rejected, or transport failure
        """
        if self.client is None or not self.from_number:
            raise DeliveryError("Twilio is not configured")

        to_number = to_e164(phone, self.default_country_code)
        try:
            result = await asyncio.to_thread(
                self.client.messages.create, body=message, from_=self.from_number, to=to_number
            )
        except (TwilioException, OSError) as e:
            raise DeliveryError(f"Twilio rejected message to {to_number}: {e}") from e

        if result.status not in self.ACCEPTED_STATUSES:
            raise DeliveryError(f"Twilio returned status {result.status} for {to_number}")
        return result.sid


class DryRunSMSSender:
    """Logs messages instead of sending them; keeps only the most recent ones"""

    HISTORY_SIZE = 100

    def __init__(self, default_country_code: str = None, history_size: int = None):
        self.default_country_code = default_country_code or settings.DEFAULT_COUNTRY_CODE
        self.sent = deque(maxlen=history_size or self.HISTORY_SIZE)
        self.sent_count = 0

    async def send(self, message: str, phone: str) -> str:
        to_number = to_e164(phone, self.default_country_code)
        self.sent.append((to_number, message))
        self.sent_count += 1
        logger.info(f"[DRY RUN] SMS to {to_number} ({len(message)} chars):\n{message}")
        return f"dry-run-{self.sent_count}"


def build_sms_sender():
    if settings.SMS_DRY_RUN:
        return DryRunSMSSender()
    return TwilioSMSSender()
