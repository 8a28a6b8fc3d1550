"""Lifecycle of the webhook verification token Notion sends during setup.

Notion posts ``{"verification_token": ...}`` once when a webhook subscription
is created. The token doubles as the HMAC secret for every later delivery, and
the operator must paste it back into Notion's UI to finish verification.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

VERIFICATION_TOKEN_KEY = "notion_webhook_verification_token"


class KeyValueStore(Protocol):
    async def get_value(self, key: str) -> str | None: ...

    async def set_value(self, key: str, value: str) -> None: ...


class OperatorSignal:
    """Operator-visible mirror of the current token, for the copy-paste step."""

    def __init__(self) -> None:
        self.value: str | None = None

    def update(self, value: str | None) -> bool:
        if value == self.value:
            return False
        self.value = value
        return True


class VerificationTokenManager:
    def __init__(self, store: KeyValueStore, signal: OperatorSignal) -> None:
        self._store = store
        self._signal = signal

    @property
    def signal(self) -> OperatorSignal:
        return self._signal

    async def current(self) -> str | None:
        """Read the stored token. Not cached, so restarts and other workers see writes."""
        return await self._store.get_value(VERIFICATION_TOKEN_KEY)

    async def provision(self, token: str) -> None:
        await self._store.set_value(VERIFICATION_TOKEN_KEY, token)
        logger.info("Stored new Notion webhook verification token")
        await self.resync()

    async def resync(self) -> bool:
        """Copy the stored token to the operator signal. Returns True if it changed."""
        stored = await self.current()
        updated = self._signal.update(stored)
        if updated and stored:
            logger.info(
                "Verification token available; paste it into Notion's webhook "
                "settings to complete verification"
            )
        return updated
