"""
Unit tests for SignupClient: store selection, validation and user messages.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from waitlist_client.errors import StoreUnavailableError
from waitlist_client.signup import (
    BUSY_MESSAGE,
    DUPLICATE_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    INVALID_EMAIL_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    SUCCESS_MESSAGE,
    SignupClient,
)
from waitlist_client.stores import (
    JoinResult,
    JoinStatus,
    LocalWaitlistStore,
    RemoteWaitlistStore,
    SignupForm,
)


def _remote(reachable=True, count=10, join_result=None) -> MagicMock:
    remote = MagicMock(spec=RemoteWaitlistStore)
    remote.name = "remote"
    remote.probe = AsyncMock(return_value=reachable)
    remote.count = AsyncMock(return_value=count)
    remote.join = AsyncMock(
        return_value=join_result or JoinResult(status=JoinStatus.SUCCESS, entry_id="srv-1")
    )
    return remote


@pytest.fixture
def local_store(client_config) -> LocalWaitlistStore:
    return LocalWaitlistStore(client_config.local, sleep=AsyncMock())


class TestStart:
    """Store selection happens once, from the probe result."""

    @pytest.mark.asyncio
    async def test_uses_remote_when_reachable(self, client_config, local_store):
        client = SignupClient(client_config, remote=_remote(count=7), local=local_store)

        store = await client.start()

        assert store is client.remote
        assert client.use_remote
        assert client.displayed_count == 7

    @pytest.mark.asyncio
    async def test_falls_back_to_local(self, client_config, local_store):
        client = SignupClient(client_config, remote=_remote(reachable=False), local=local_store)

        store = await client.start()

        assert store is local_store
        assert not client.use_remote
        assert client.displayed_count == 0

    @pytest.mark.asyncio
    async def test_remote_count_failure_shows_local_count(self, client_config, local_store):
        await local_store.join(SignupForm(email="a@b.com", consent=True))
        remote = _remote()
        remote.count.side_effect = StoreUnavailableError("down")
        client = SignupClient(client_config, remote=remote, local=local_store)

        await client.start()

        assert client.use_remote
        assert client.displayed_count == 1


class TestLocalValidation:
    """Form checks run before any store is touched."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "form, message",
        [
            (SignupForm(email="", consent=True), MISSING_FIELDS_MESSAGE),
            (SignupForm(email="a@b.com", consent=False), MISSING_FIELDS_MESSAGE),
            (SignupForm(email="not-an-email", consent=True), INVALID_EMAIL_MESSAGE),
            (SignupForm(email="a b@c.com", consent=True), INVALID_EMAIL_MESSAGE),
            (SignupForm(email=" a@b.com", consent=True), INVALID_EMAIL_MESSAGE),
            (SignupForm(email="a@b.com ", consent=True), INVALID_EMAIL_MESSAGE),
            (SignupForm(email="\ta@b.com\n", consent=True), INVALID_EMAIL_MESSAGE),
            (SignupForm(email="   ", consent=True), MISSING_FIELDS_MESSAGE),
        ],
    )
    async def test_invalid_forms(self, client_config, local_store, form, message):
        remote = _remote()
        client = SignupClient(client_config, remote=remote, local=local_store)
        await client.start()

        result = await client.submit(form)

        assert result.status == JoinStatus.INVALID
        assert result.message == message
        remote.join.assert_not_awaited()


class TestRemoteMode:
    @pytest.mark.asyncio
    async def test_success_refreshes_authoritative_count(self, client_config, local_store):
        remote = _remote(count=10)
        client = SignupClient(client_config, remote=remote, local=local_store)
        await client.start()
        remote.count.return_value = 11

        result = await client.submit(
            SignupForm(email="a@b.com", gamertag=" Ninja ", consent=True)
        )

        assert result.success
        assert result.message == SUCCESS_MESSAGE
        assert result.entry_id == "srv-1"
        assert client.displayed_count == 11
        sent = remote.join.await_args.args[0]
        assert sent.email == "a@b.com"
        assert sent.gamertag == "Ninja"
        assert await local_store.count() == 0

    @pytest.mark.asyncio
    async def test_duplicate_message(self, client_config, local_store):
        remote = _remote(join_result=JoinResult(status=JoinStatus.DUPLICATE))
        client = SignupClient(client_config, remote=remote, local=local_store)

        result = await client.submit(SignupForm(email="a@b.com", consent=True))

        assert result.status == JoinStatus.DUPLICATE
        assert result.message == DUPLICATE_MESSAGE

    @pytest.mark.asyncio
    async def test_server_validation_message_passed_through(self, client_config, local_store):
        remote = _remote(
            join_result=JoinResult(status=JoinStatus.INVALID, error="Invalid email format")
        )
        client = SignupClient(client_config, remote=remote, local=local_store)

        result = await client.submit(SignupForm(email="a@b.com", consent=True))

        assert result.message == "Invalid email format"

    @pytest.mark.asyncio
    async def test_rate_limited_message(self, client_config, local_store):
        remote = _remote(
            join_result=JoinResult(status=JoinStatus.RATE_LIMITED, retry_after=61)
        )
        client = SignupClient(client_config, remote=remote, local=local_store)

        result = await client.submit(SignupForm(email="a@b.com", consent=True))

        assert result.status == JoinStatus.RATE_LIMITED
        assert "2 minute" in result.message

    @pytest.mark.asyncio
    async def test_store_exception_becomes_generic_error(self, client_config, local_store):
        remote = _remote()
        remote.join.side_effect = RuntimeError("socket exploded")
        client = SignupClient(client_config, remote=remote, local=local_store)

        result = await client.submit(SignupForm(email="a@b.com", consent=True))

        assert result.status == JoinStatus.ERROR
        assert result.message == GENERIC_ERROR_MESSAGE
        assert not client.busy

    @pytest.mark.asyncio
    async def test_failure_does_not_touch_local_store(self, client_config, local_store):
        remote = _remote(join_result=JoinResult(status=JoinStatus.ERROR))
        client = SignupClient(client_config, remote=remote, local=local_store)

        await client.submit(SignupForm(email="a@b.com", consent=True))

        assert await local_store.count() == 0


class TestLocalMode:
    @pytest.mark.asyncio
    async def test_signup_then_duplicate(self, client_config, local_store):
        client = SignupClient(client_config, remote=_remote(reachable=False), local=local_store)
        await client.start()

        first = await client.submit(SignupForm(email="a@b.com", consent=True))
        second = await client.submit(SignupForm(email="A@B.com", consent=True))

        assert first.success
        assert client.displayed_count == 1
        assert second.status == JoinStatus.DUPLICATE
        assert second.message == DUPLICATE_MESSAGE

    @pytest.mark.asyncio
    async def test_store_chosen_once(self, client_config, local_store):
        remote = _remote(reachable=False)
        client = SignupClient(client_config, remote=remote, local=local_store)
        await client.start()
        remote.probe.return_value = True

        await client.submit(SignupForm(email="a@b.com", consent=True))

        assert remote.probe.await_count == 1
        remote.join.assert_not_awaited()
        assert await local_store.count() == 1


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_second_submit_while_busy_is_rejected(self, client_config, local_store):
        gate = asyncio.Event()
        remote = _remote()

        async def slow_join(form):
            await gate.wait()
            return JoinResult(status=JoinStatus.SUCCESS, entry_id="srv-1")

        remote.join.side_effect = slow_join
        client = SignupClient(client_config, remote=remote, local=local_store)
        await client.start()

        first = asyncio.create_task(client.submit(SignupForm(email="a@b.com", consent=True)))
        await asyncio.sleep(0)
        assert client.busy

        second = await client.submit(SignupForm(email="c@d.com", consent=True))
        gate.set()

        assert second.message == BUSY_MESSAGE
        assert (await first).success
        assert remote.join.await_count == 1
