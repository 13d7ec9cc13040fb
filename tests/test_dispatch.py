import asyncio
import json

from conftest import FakeConnection, make_identity, make_server


def test_end_to_end_scenario_with_fake_connections():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        assert a.connection.of_type("display-name") == [
            {"type": "display-name", "message": {"displayName": "Name A", "deviceName": "Device A"}}
        ]

        b = await server.accept(FakeConnection("B"), make_identity("B"), "O1")
        assert a.connection.of_type("peer-joined")[0]["peer"]["id"] == "B"
        assert [p["id"] for p in b.connection.of_type("peers")[0]["peers"]] == ["A"]

        await server.on_message(a, json.dumps({"type": "offer", "to": "B", "sdp": "v=0..."}))
        assert b.connection.of_type("offer") == [{"type": "offer", "sdp": "v=0...", "sender": "A"}]

        await server.on_message(b, '{"type":"disconnect"}')
        assert a.connection.of_type("peer-left") == [{"type": "peer-left", "peerId": "B"}]
        assert server.rooms.members("O1") == [a]
        assert b.connection.open is False

    asyncio.run(run())


def test_greeting_order_is_roster_ping_display_name():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        assert [m["type"] for m in a.connection.sent] == ["peers", "ping", "display-name"]

    asyncio.run(run())


def test_relay_never_crosses_rooms():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        b = await server.accept(FakeConnection("B"), make_identity("B"), "O2")
        before = list(b.connection.sent)

        await server.on_message(a, json.dumps({"type": "offer", "to": "B", "sdp": "x"}))
        assert b.connection.sent == before

    asyncio.run(run())


def test_unknown_target_is_dropped_silently():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        before = list(a.connection.sent)
        await server.on_message(a, json.dumps({"type": "answer", "to": "nobody"}))
        assert a.connection.sent == before
        assert a.connection.open

    asyncio.run(run())


def test_relay_strips_to_and_overwrites_sender():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        b = await server.accept(FakeConnection("B"), make_identity("B"), "O1")

        await server.on_message(a, json.dumps({"type": "candidate", "to": "B", "sender": "B", "candidate": "c1"}))
        await server.on_message(a, json.dumps({"type": "candidate", "to": "B", "candidate": "c2"}))

        delivered = b.connection.of_type("candidate")
        assert len(delivered) == 2
        for msg in delivered:
            assert "to" not in msg
            assert msg["sender"] == "A"

    asyncio.run(run())


def test_pong_with_target_is_both_handled_and_relayed():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        b = await server.accept(FakeConnection("B"), make_identity("B"), "O1")
        before = a.last_heartbeat_at

        await asyncio.sleep(0.01)
        await server.on_message(a, '{"type":"pong","to":"B"}')

        assert a.last_heartbeat_at > before
        assert b.connection.of_type("pong") == [{"type": "pong", "sender": "A"}]

    asyncio.run(run())


def test_untyped_frame_with_target_is_relayed():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        b = await server.accept(FakeConnection("B"), make_identity("B"), "O1")

        await server.on_message(a, json.dumps({"to": "B", "sdp": "v=0"}))

        assert b.connection.sent[-1] == {"sdp": "v=0", "sender": "A"}
        assert server.rooms.contains(a)

    asyncio.run(run())


def test_malformed_frame_is_dropped_and_connection_stays_open():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        before = list(a.connection.sent)

        await server.on_message(a, "{not json")
        await server.on_message(a, "[]")

        assert a.connection.sent == before
        assert a.connection.open
        assert server.rooms.contains(a)

    asyncio.run(run())


def test_send_is_a_noop_when_unavailable():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        count = len(a.connection.sent)

        await server.send(None, {"type": "ping"})

        server.accepting = False
        await server.send(a, {"type": "ping"})
        assert len(a.connection.sent) == count

        server.accepting = True
        a.connection.open = False
        await server.send(a, {"type": "ping"})
        assert len(a.connection.sent) == count

    asyncio.run(run())


def test_send_swallows_transport_errors():
    class Broken(FakeConnection):
        async def send(self, text):
            raise OSError("broken pipe")

    async def run():
        server = make_server()
        a = await server.accept(Broken("A"), make_identity("A"), "O1")
        await server.send(a, {"type": "ping"})
        assert server.rooms.contains(a)

    asyncio.run(run())


def test_stop_evicts_everyone_and_cancels_timers():
    async def run():
        server = make_server()
        a = await server.accept(FakeConnection("A"), make_identity("A"), "O1")
        b = await server.accept(FakeConnection("B"), make_identity("B"), "O2")
        await server.stop()

        assert len(server.rooms) == 0
        assert a.heartbeat_timer is None and b.heartbeat_timer is None
        assert not a.connection.open and not b.connection.open
        assert server.accepting is False

    asyncio.run(run())


def test_stalled_reader_does_not_block_its_room():
    class Stalled(FakeConnection):
        async def send(self, text):
            await asyncio.Event().wait()   # never drains

    async def run():
        server = make_server(SEND_TIMEOUT=0.05)
        a = await server.accept(Stalled("A"), make_identity("A"), "O1")

        b = await asyncio.wait_for(server.accept(FakeConnection("B"), make_identity("B"), "O1"), 1.0)
        assert [p["id"] for p in b.connection.of_type("peers")[0]["peers"]] == ["A"]

        assert await asyncio.wait_for(server.rooms.leave(a), 1.0) is True
        assert b.connection.of_type("peer-left") == [{"type": "peer-left", "peerId": "A"}]
        await server.stop()

    asyncio.run(run())
