"""
EtherMom Bot - Messaging.
Delivers alert text to the operator through Telegram or an IFTTT Maker
webhook. Delivery failures raise DeliveryError.
"""

import logging

import requests

from config import REQUEST_TIMEOUT_SECONDS
from errors import ConfigError, DeliveryError

TELEGRAM_API = "https://api.telegram.org/bot{token}"
IFTTT_WEBHOOK = "https://maker.ifttt.com/trigger/{event}/with/key/{key}"

logger = logging.getLogger("EtherMom")


class TelegramSink:
    """Send messages to a Telegram chat through the Bot API."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        parse_mode: str = "HTML",
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.api_url = TELEGRAM_API.format(token=bot_token)
        self.chat_id = chat_id
        self.parse_mode = parse_mode
        self.timeout = timeout

    def send(self, message: str) -> None:
        try:
            resp = requests.post(
                f"{self.api_url}/sendMessage",
                json={
                    "chat_id": self.chat_id,
                    "text": message,
                    "parse_mode": self.parse_mode,
                },
                timeout=self.timeout,
            )
            result = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise DeliveryError(f"Telegram request failed (sendMessage): {e}") from e

        if not isinstance(result, dict) or not result.get("ok"):
            raise DeliveryError(f"Telegram API error on sendMessage: {result}")
        logger.debug("Telegram message sent to %s", self.chat_id)


class IftttSink:
    """Trigger an IFTTT Maker event with the message as ``value1``."""

    def __init__(
        self, key: str, event: str, timeout: float = REQUEST_TIMEOUT_SECONDS
    ) -> None:
        self.url = IFTTT_WEBHOOK.format(event=event, key=key)
        self.timeout = timeout

    def send(self, message: str) -> None:
        try:
            resp = requests.post(
                self.url, json={"value1": message}, timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise DeliveryError(f"IFTTT request failed: {e}") from e
        logger.debug("IFTTT event triggered")


def build_sink(
    kind: str,
    bot_token: str | None = None,
    chat_id: str | None = None,
    ifttt_key: str | None = None,
    ifttt_event: str | None = None,
):
    """Create the sink selected by MESSAGING in config.py."""
    kind = (kind or "").strip().lower()
    if kind == "telegram":
        if not bot_token or not chat_id:
            raise ConfigError("BOT_TOKEN and CHAT_ID must be set in .env for Telegram")
        return TelegramSink(bot_token, chat_id)
    if kind == "ifttt":
        if not ifttt_key or not ifttt_event:
            raise ConfigError("IFTTT_KEY and IFTTT_EVENT must be set in .env for IFTTT")
        return IftttSink(ifttt_key, ifttt_event)
    raise ConfigError(f"Unknown MESSAGING channel {kind!r}. Use 'telegram' or 'ifttt'")
