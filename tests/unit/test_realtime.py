"""Unit tests for the realtime connection registry."""

import pytest

from app.realtime import ConnectionManager


class FakeSocket:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.accepted = False
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


@pytest.mark.asyncio
async def test_publish_reaches_only_the_users_sockets():
    """Test events are delivered to the target user's feed only."""
    manager = ConnectionManager()
    alice, bob = FakeSocket(), FakeSocket()
    await manager.connect("alice", alice)
    await manager.connect("bob", bob)

    delivered = await manager.publish("alice", "notification", {"id": "n1"})

    assert delivered == 1
    assert alice.accepted is True
    assert alice.sent == [{"type": "notification", "data": {"id": "n1"}}]
    assert bob.sent == []


@pytest.mark.asyncio
async def test_publish_to_user_without_sockets_is_noop():
    """Test publishing with no subscribers delivers nothing."""
    assert await ConnectionManager().publish("nobody", "message", {}) == 0


@pytest.mark.asyncio
async def test_dead_sockets_are_dropped():
    """Test a failing socket is removed and others still receive events."""
    manager = ConnectionManager()
    healthy, dead = FakeSocket(), FakeSocket(fail=True)
    await manager.connect("alice", healthy)
    await manager.connect("alice", dead)

    delivered = await manager.publish("alice", "message", {"id": "m1"})

    assert delivered == 1
    assert manager.subscriber_count("alice") == 1


@pytest.mark.asyncio
async def test_disconnect_tears_down_subscription():
    """Test closing the last socket removes the user's channel."""
    manager = ConnectionManager()
    socket = FakeSocket()
    await manager.connect("alice", socket)

    manager.disconnect("alice", socket)

    assert manager.subscriber_count("alice") == 0
    assert "alice" not in manager.channels
