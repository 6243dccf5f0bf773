"""Unit tests for relay.services.replication: per-observer fan-out."""

import asyncio
import unittest
from unittest.mock import AsyncMock

from relay.core.identity import Identity
from relay.models import User
from relay.services.messages import send_message
from relay.services.presence import on_connect, set_name
from relay.services.reducers import call_reducer
from relay.services.replication import ReplicationHub, initial_subscription
from tests.helpers import session_factory


class TestReplicationHub(unittest.TestCase):
    """publish sends each observer only the changed rows it may see."""

    def setUp(self) -> None:
        self.factory = session_factory()
        self.member = Identity.generate()
        self.guest = Identity.generate()
        with self.factory() as session:
            session.add(User(identity=self.member.to_hex(), online=True, authorized=True))
            session.add(User(identity=self.guest.to_hex(), online=True, authorized=False))
            session.commit()
        self.hub = ReplicationHub()
        self.member_ws = AsyncMock()
        self.guest_ws = AsyncMock()
        asyncio.run(self.hub.connect(self.member, self.member_ws))
        asyncio.run(self.hub.connect(self.guest, self.guest_ws))

    def _publish(self, outcome) -> None:
        asyncio.run(self.hub.publish(outcome, self.factory))

    def test_message_reaches_authorized_observers_only(self) -> None:
        with self.factory() as session:
            outcome = call_reducer(session, send_message, self.member, "hello")
        self._publish(outcome)
        self.member_ws.send_json.assert_awaited_once()
        payload = self.member_ws.send_json.await_args.args[0]
        self.assertEqual(payload["type"], "transaction_update")
        self.assertEqual([m["text"] for m in payload["messages"]], ["hello"])
        self.assertEqual(payload["users"], [])
        self.guest_ws.send_json.assert_not_awaited()

    def test_user_change_reaches_only_its_owner(self) -> None:
        with self.factory() as session:
            outcome = call_reducer(session, set_name, self.member, "ada")
        self._publish(outcome)
        payload = self.member_ws.send_json.await_args.args[0]
        self.assertEqual(payload["users"][0]["name"], "ada")
        self.guest_ws.send_json.assert_not_awaited()

    def test_failed_outcome_is_not_published(self) -> None:
        with self.factory() as session:
            outcome = call_reducer(session, send_message, self.guest, "hi")
        self.assertFalse(outcome.ok)
        self._publish(outcome)
        self.member_ws.send_json.assert_not_awaited()
        self.guest_ws.send_json.assert_not_awaited()

    def test_stale_connection_is_dropped(self) -> None:
        self.member_ws.send_json.side_effect = RuntimeError("closed")
        with self.factory() as session:
            first = call_reducer(session, send_message, self.member, "hello")
            second = call_reducer(session, send_message, self.member, "again")
        self._publish(first)
        self._publish(second)
        self.assertEqual(self.member_ws.send_json.await_count, 1)

    def test_disconnect_unknown_socket_is_noop(self) -> None:
        asyncio.run(self.hub.disconnect(Identity.generate(), AsyncMock()))
        with self.factory() as session:
            outcome = call_reducer(session, send_message, self.member, "hello")
        self._publish(outcome)
        self.member_ws.send_json.assert_awaited_once()


class TestHeldConnection(unittest.TestCase):
    """A held connection queues updates until ready() flushes them in order."""

    def setUp(self) -> None:
        self.factory = session_factory()
        self.member = Identity.generate()
        with self.factory() as session:
            session.add(User(identity=self.member.to_hex(), online=True, authorized=True))
            session.commit()
        self.hub = ReplicationHub()
        self.ws = AsyncMock()
        asyncio.run(self.hub.connect(self.member, self.ws, hold=True))

    def _send(self, text: str) -> None:
        with self.factory() as session:
            outcome = call_reducer(session, send_message, self.member, text)
        asyncio.run(self.hub.publish(outcome, self.factory))

    def _sent_texts(self) -> list[str]:
        return [
            m["text"]
            for call in self.ws.send_json.await_args_list
            for m in call.args[0]["messages"]
        ]

    def test_updates_wait_for_ready(self) -> None:
        self._send("one")
        self._send("two")
        self.ws.send_json.assert_not_awaited()
        asyncio.run(self.hub.ready(self.ws))
        self.assertEqual(self._sent_texts(), ["one", "two"])

    def test_updates_after_ready_are_sent_directly(self) -> None:
        self._send("one")
        asyncio.run(self.hub.ready(self.ws))
        self._send("two")
        self.assertEqual(self._sent_texts(), ["one", "two"])

    def test_disconnect_discards_queue(self) -> None:
        self._send("one")
        asyncio.run(self.hub.disconnect(self.member, self.ws))
        asyncio.run(self.hub.ready(self.ws))
        self.ws.send_json.assert_not_awaited()


class TestInitialSubscription(unittest.TestCase):
    def test_new_caller_sees_own_row_and_no_messages(self) -> None:
        factory = session_factory()
        identity = Identity.generate()
        with factory() as session:
            call_reducer(session, on_connect, identity)
            snapshot = initial_subscription(session, identity)
        self.assertEqual(snapshot["type"], "initial_subscription")
        self.assertEqual([u["identity"] for u in snapshot["users"]], [identity.to_hex()])
        self.assertEqual(snapshot["messages"], [])


if __name__ == "__main__":
    unittest.main()
