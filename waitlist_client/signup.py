"""
Signup client: validates form values and hands them to the selected store.

The store is chosen once by ``start()``: the remote service when its health
probe passes, the local JSON file otherwise.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from waitlist_api.validators import is_valid_email, mask_email
from waitlist_client.config import ClientConfig
from waitlist_client.errors import StoreUnavailableError
from waitlist_client.stores import (
    JoinResult,
    JoinStatus,
    LocalWaitlistStore,
    RemoteWaitlistStore,
    SignupForm,
    WaitlistStore,
)

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please fill in all required fields and accept the privacy policy."
INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
DUPLICATE_MESSAGE = "This email is already on the waitlist!"
GENERIC_ERROR_MESSAGE = "Failed to join waitlist. Please try again later."
BUSY_MESSAGE = "A signup is already in progress."
SUCCESS_MESSAGE = "Welcome to the CoachGG family! 🎮"


@dataclass
class SubmitResult:
    """What the user is told after pressing submit."""

    status: JoinStatus
    message: str
    entry_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == JoinStatus.SUCCESS


class SignupClient:
    """Form submission logic of the landing page."""

    def __init__(
        self,
        config: ClientConfig,
        remote: Optional[RemoteWaitlistStore] = None,
        local: Optional[LocalWaitlistStore] = None,
    ):
        self.config = config
        self.remote = remote or RemoteWaitlistStore(config.api)
        self.local = local or LocalWaitlistStore(config.local)
        self.store: Optional[WaitlistStore] = None
        self.displayed_count = 0
        self._submit_lock = asyncio.Lock()

    @property
    def use_remote(self) -> bool:
        return self.store is self.remote

    @property
    def busy(self) -> bool:
        return self._submit_lock.locked()

    async def start(self) -> WaitlistStore:
        """Probe the service once and pick the store for this session."""
        if await self.remote.probe():
            self.store = self.remote
            logger.info("Waitlist service connected")
        else:
            self.store = self.local
            logger.info("Using local storage (waitlist service not available)")

        await self.refresh_count()
        return self.store

    async def refresh_count(self) -> int:
        """Update ``displayed_count`` from the active store."""
        if self.store is None:
            await self.start()
            return self.displayed_count

        try:
            self.displayed_count = await self.store.count()
        except StoreUnavailableError as e:
            logger.error(f"Error fetching waitlist count: {e}")
            if self.store is self.remote:
                try:
                    self.displayed_count = await self.local.count()
                except StoreUnavailableError as local_error:
                    logger.error(f"Error reading local waitlist: {local_error}")
        return self.displayed_count

    async def submit(self, form: SignupForm) -> SubmitResult:
        """
        Validate and submit one signup.

        Never raises for a failed signup; the returned message tells the user
        whether the email was invalid, already registered, or should be
        retried later.
        """
        email = form.email or ""
        if not email.strip() or not form.consent:
            return SubmitResult(JoinStatus.INVALID, MISSING_FIELDS_MESSAGE)
        if not is_valid_email(email):
            return SubmitResult(JoinStatus.INVALID, INVALID_EMAIL_MESSAGE)

        if self._submit_lock.locked():
            return SubmitResult(JoinStatus.ERROR, BUSY_MESSAGE)

        async with self._submit_lock:
            if self.store is None:
                await self.start()

            form = SignupForm(
                email=email,
                gamertag=(form.gamertag or "").strip(),
                primary_game=(form.primary_game or "").strip(),
                consent=True,
            )
            try:
                result = await self.store.join(form)
            except Exception as e:
                logger.error(f"Signup failed: {type(e).__name__}: {e}", exc_info=True)
                result = JoinResult(status=JoinStatus.ERROR)

            if result.ok:
                await self.refresh_count()
                logger.info(
                    f"Waitlist signup tracked: {mask_email(email)} via {self.store.name} store"
                )

        return SubmitResult(result.status, _message_for(result), entry_id=result.entry_id)


def _message_for(result: JoinResult) -> str:
    if result.status == JoinStatus.SUCCESS:
        return SUCCESS_MESSAGE
    if result.status == JoinStatus.DUPLICATE:
        return DUPLICATE_MESSAGE
    if result.status == JoinStatus.INVALID:
        return result.error or INVALID_EMAIL_MESSAGE
    if result.status == JoinStatus.RATE_LIMITED:
        if result.retry_after:
            minutes = max(1, -(-result.retry_after // 60))
            return f"Too many signup attempts. Please try again in {minutes} minute(s)."
        return "Too many signup attempts. Please try again later."
    return GENERIC_ERROR_MESSAGE
