# cw/messages.py
"""
Tipi scambiati tra motore, router e trasporto.

- Messaggi del log chat: SystemMessage, MorseMessage, TextMessage (immutabili).
- Eventi in ingresso dal relay: unione chiusa di 5 varianti, vedi parse_event().
- Effetti restituiti dal motore: PlayCue, Transmit (li esegue l'app, non il core).
"""
from __future__ import annotations
import time
from dataclasses import dataclass
from typing import FrozenSet, Union

from cw.errors import MalformedInboundEvent


def now_ms() -> int:
    return int(time.time() * 1000)


# ───────── log chat
@dataclass(frozen=True)
class SystemMessage:
    text: str
    timestamp: int

@dataclass(frozen=True)
class MorseMessage:
    sender: str
    code: str
    text: str
    timestamp: int

@dataclass(frozen=True)
class TextMessage:
    sender: str
    text: str
    timestamp: int

Message = Union[SystemMessage, MorseMessage, TextMessage]


# ───────── eventi in ingresso
@dataclass(frozen=True)
class PresenceJoined:
    username: str
    text: str

@dataclass(frozen=True)
class PresenceLeft:
    username: str
    text: str

@dataclass(frozen=True)
class RoomRoster:
    usernames: FrozenSet[str]

@dataclass(frozen=True)
class MorseReceived:
    username: str
    last_symbol: str
    code: str
    transcript: str
    timestamp: int

@dataclass(frozen=True)
class TextReceived:
    username: str
    text: str
    timestamp: int

InboundEvent = Union[PresenceJoined, PresenceLeft, RoomRoster, MorseReceived, TextReceived]


# ───────── effetti
CUE_SHORT = "short"
CUE_LONG  = "long"

@dataclass(frozen=True)
class PlayCue:
    kind: str          # "short" | "long"

@dataclass(frozen=True)
class Transmit:
    last_symbol: str   # "." | "-"
    code: str          # codice completo del carattere appena decodificato
    transcript: str    # testo cumulativo fino a qui


# ───────── parsing dal filo (nomi evento Socket.IO)
def _field(name, data, key, kind=str):
    if key not in data:
        raise MalformedInboundEvent(f"{name}: manca il campo '{key}'", event=(name, data))
    v = data[key]
    if kind is int:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise MalformedInboundEvent(f"{name}: '{key}' non numerico", event=(name, data))
        return int(v)
    if not isinstance(v, kind):
        raise MalformedInboundEvent(f"{name}: '{key}' di tipo errato", event=(name, data))
    return v

def _user_joined(data):
    return PresenceJoined(_field("user-joined", data, "username"),
                          _field("user-joined", data, "message"))

def _user_left(data):
    return PresenceLeft(_field("user-left", data, "username"),
                        _field("user-left", data, "message"))

def _room_users(data):
    users = _field("room-users", data, "users", (list, tuple, set, frozenset))
    if not all(isinstance(u, str) for u in users):
        raise MalformedInboundEvent("room-users: nome utente non testuale", event=("room-users", data))
    return RoomRoster(frozenset(users))

def _receive_morse(data):
    n = "receive-morse"
    sym = _field(n, data, "morseSignal")
    if sym not in (".", "-"):
        raise MalformedInboundEvent(f"{n}: simbolo '{sym}' non valido", event=(n, data))
    return MorseReceived(_field(n, data, "username"), sym,
                         _field(n, data, "morseCode"), _field(n, data, "text"),
                         _field(n, data, "timestamp", int))

def _receive_message(data):
    n = "receive-message"
    return TextReceived(_field(n, data, "username"), _field(n, data, "message"),
                        _field(n, data, "timestamp", int))

WIRE_EVENTS = {
    "user-joined":     _user_joined,
    "user-left":       _user_left,
    "room-users":      _room_users,
    "receive-morse":   _receive_morse,
    "receive-message": _receive_message,
}

def parse_event(name: str, data) -> InboundEvent:
    """Nome evento + payload dal relay -> variante tipizzata, altrimenti MalformedInboundEvent."""
    parser = WIRE_EVENTS.get(name)
    if parser is None:
        raise MalformedInboundEvent(f"evento sconosciuto: {name!r}", event=(name, data))
    if not isinstance(data, dict):
        raise MalformedInboundEvent(f"{name}: payload non è un oggetto", event=(name, data))
    return parser(data)
