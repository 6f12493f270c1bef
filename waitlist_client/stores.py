"""
Waitlist stores for the signup client.

``RemoteWaitlistStore`` talks to the waitlist service. ``LocalWaitlistStore``
keeps signups in a JSON file when the service is unreachable. Local entries
are never pushed to the service later.
"""

import asyncio
import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional

import aiofiles
import httpx

from waitlist_client import __version__
from waitlist_client.config import APIConfig, LocalStoreConfig
from waitlist_client.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

USER_AGENT = f"coachgg-waitlist-client/{__version__}"


class JoinStatus(str, Enum):
    """Outcome categories of a join attempt."""

    SUCCESS = "success"
    DUPLICATE = "duplicate"
    INVALID = "invalid"
    RATE_LIMITED = "rate_limited"
    ERROR = "error"


@dataclass
class SignupForm:
    """Values collected by the signup form."""

    email: str
    gamertag: str = ""
    primary_game: str = ""
    consent: bool = False


@dataclass
class JoinResult:
    """Result of ``WaitlistStore.join``."""

    status: JoinStatus
    entry_id: Optional[str] = None
    timestamp: Optional[str] = None
    error: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == JoinStatus.SUCCESS


class WaitlistStore(ABC):
    """Abstract interface for where signups go."""

    name: str = "store"

    @abstractmethod
    async def join(self, form: SignupForm) -> JoinResult:
        """
        Add a signup.

        Args:
            form: Already validated form values

        Returns:
            JoinResult describing success or the rejection reason
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """
        Number of signups known to this store.

        Raises:
            StoreUnavailableError: If the count cannot be read
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        pass


class RemoteWaitlistStore(WaitlistStore):
    """Store backed by the waitlist service's HTTP API."""

    name = "remote"

    def __init__(self, config: APIConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.config.timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self.client

    async def probe(self) -> bool:
        """Return True if ``GET /health`` answers 200."""
        try:
            response = await self._get_client().get(f"{self.config.url}/health")
        except httpx.HTTPError as e:
            logger.info(f"Waitlist service unreachable: {type(e).__name__}: {e}")
            return False

        if response.status_code != 200:
            logger.info(f"Waitlist service unhealthy (HTTP {response.status_code})")
            return False
        return True

    async def join(self, form: SignupForm) -> JoinResult:
        try:
            response = await self._get_client().post(
                f"{self.config.url}/waitlist/join",
                json={
                    "email": form.email,
                    "gamertag": form.gamertag or "",
                    "primaryGame": form.primary_game or "",
                    "consent": True,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Join request failed: {type(e).__name__}: {e}")
            return JoinResult(status=JoinStatus.ERROR)

        data = _json_or_empty(response)

        if response.status_code == 201:
            return JoinResult(
                status=JoinStatus.SUCCESS,
                entry_id=data.get("id"),
                timestamp=data.get("timestamp"),
            )
        if response.status_code == 409:
            return JoinResult(status=JoinStatus.DUPLICATE, error=data.get("error"))
        if response.status_code == 400:
            return JoinResult(status=JoinStatus.INVALID, error=data.get("error"))
        if response.status_code == 429:
            retry_after = data.get("retryAfter") or response.headers.get("Retry-After")
            return JoinResult(
                status=JoinStatus.RATE_LIMITED,
                error=data.get("error"),
                retry_after=int(retry_after) if retry_after else None,
            )

        logger.error(f"Unexpected join response: HTTP {response.status_code}")
        return JoinResult(status=JoinStatus.ERROR, error=data.get("error"))

    async def count(self) -> int:
        try:
            response = await self._get_client().get(f"{self.config.url}/waitlist/count")
            response.raise_for_status()
            return int(response.json()["count"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            raise StoreUnavailableError(f"Could not fetch waitlist count: {e}")

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None


class LocalWaitlistStore(WaitlistStore):
    """Store backed by a JSON file, used when the service is unreachable."""

    name = "local"

    def __init__(
        self,
        config: LocalStoreConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self.path = Path(config.path)
        self._sleep = sleep
        self._entries: Optional[list[dict]] = None

    async def _load(self) -> list[dict]:
        if self._entries is not None:
            return self._entries

        if not self.path.exists():
            self._entries = []
            return self._entries

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read() or "[]")
        except (OSError, json.JSONDecodeError) as e:
            raise StoreUnavailableError(f"Could not read local waitlist {self.path}: {e}")

        self._entries = data if isinstance(data, list) else []
        return self._entries

    async def _save(self, entries: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(entries, indent=2))
        os.replace(tmp_path, self.path)

    async def contains(self, email: str) -> bool:
        """Case-insensitive membership check."""
        wanted = email.lower()
        return any(
            str(entry.get("email", "")).lower() == wanted for entry in await self._load()
        )

    async def join(self, form: SignupForm) -> JoinResult:
        try:
            if await self.contains(form.email):
                return JoinResult(status=JoinStatus.DUPLICATE)

            await self._sleep(self.config.simulated_latency_seconds)

            entry = {
                "id": str(uuid.uuid4()),
                "email": form.email,
                "gamertag": form.gamertag or "",
                "primaryGame": form.primary_game or "",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "userAgent": USER_AGENT,
                "referrer": "direct",
            }
            entries = await self._load()
            await self._save(entries + [entry])
            entries.append(entry)
        except (OSError, StoreUnavailableError) as e:
            logger.error(f"Local signup failed: {e}")
            return JoinResult(status=JoinStatus.ERROR)

        return JoinResult(
            status=JoinStatus.SUCCESS, entry_id=entry["id"], timestamp=entry["timestamp"]
        )

    async def count(self) -> int:
        return len(await self._load())


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
