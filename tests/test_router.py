import pytest

from cw.errors import MalformedInboundEvent
from cw.messages import (
    SystemMessage, MorseMessage, TextMessage, PlayCue,
    parse_event, MorseReceived, RoomRoster,
)
from cw.router import InboundRouter


@pytest.fixture
def router(session):
    return InboundRouter(session, clock=lambda: 1234)


def test_presence_events_become_system_messages(router, session):
    router.route("user-joined", {"username": "bob", "message": "bob joined the room"})
    router.route("user-left", {"username": "bob", "message": "bob left the room"})
    assert session.messages == [
        SystemMessage("bob joined the room", 1234),
        SystemMessage("bob left the room", 1234),
    ]


def test_roster_replaces_membership(router, session):
    assert router.route("room-users", {"users": ["alice", "bob"]}) == []
    assert session.members == {"alice", "bob"}
    router.route("room-users", {"users": ["alice"]})
    assert session.members == {"alice"}
    assert session.messages == []


@pytest.mark.parametrize("sym,cue", [(".", "short"), ("-", "long")])
def test_morse_event_logs_message_and_requests_cue(router, session, sym, cue):
    out = router.route("receive-morse", {
        "username": "bob", "morseSignal": sym, "morseCode": "..-" if sym == "-" else "...",
        "text": "SU", "timestamp": 1700000000000,
    })
    assert out == [PlayCue(cue)]
    msg = session.messages[-1]
    assert isinstance(msg, MorseMessage)
    assert (msg.sender, msg.text, msg.timestamp) == ("bob", "SU", 1700000000000)


def test_text_event(router, session):
    assert router.route("receive-message", {"username": "bob", "message": "hi", "timestamp": 5}) == []
    assert session.messages == [TextMessage("bob", "hi", 5)]


def test_arrival_order_is_kept(router, session):
    router.route("receive-message", {"username": "b", "message": "second", "timestamp": 20})
    router.route("receive-message", {"username": "c", "message": "first", "timestamp": 10})
    assert [m.text for m in session.messages] == ["second", "first"]


def test_malformed_event_is_reported_and_processing_continues(router, session):
    router.route("user-joined", {"username": "bob", "message": "bob joined"})
    with pytest.raises(MalformedInboundEvent):
        router.route("typing", {"username": "bob"})
    assert len(session.messages) == 1
    router.route("receive-message", {"username": "bob", "message": "still here", "timestamp": 9})
    assert len(session.messages) == 2


@pytest.mark.parametrize("name,data", [
    ("receive-morse", {"username": "b", "morseSignal": "x", "morseCode": ".", "text": "E", "timestamp": 1}),
    ("receive-morse", {"username": "b", "morseSignal": ".", "text": "E", "timestamp": 1}),
    ("receive-message", {"username": "b", "message": "hi", "timestamp": "yesterday"}),
    ("receive-message", {"username": "b", "message": "hi", "timestamp": True}),
    ("room-users", {"users": "alice"}),
    ("room-users", {"users": ["alice", 3]}),
    ("user-left", {"username": "b"}),
    ("user-joined", ["not", "a", "dict"]),
    ("user-joined", None),
])
def test_wrong_shapes_are_malformed(router, session, name, data):
    with pytest.raises(MalformedInboundEvent) as ei:
        router.route(name, data)
    assert ei.value.event == (name, data)
    assert session.messages == []


def test_parse_event_returns_typed_variants():
    ev = parse_event("receive-morse", {"username": "b", "morseSignal": "-", "morseCode": "-",
                                       "text": "T", "timestamp": 3.0})
    assert ev == MorseReceived("b", "-", "-", "T", 3)
    assert parse_event("room-users", {"users": []}) == RoomRoster(frozenset())
