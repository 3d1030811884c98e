# cw/session.py
"""
Contesto di sessione: tutto lo stato della chat in un solo oggetto.
Creato vuoto al join, svuotato con reset(); niente viene salvato su disco.
"""
import random
import string

from cw.errors import InvalidInput
from cw.transcript import TranscriptBuilder

ROOM_ID_LEN = 6
_ROOM_ALPHABET = string.digits + string.ascii_uppercase


def generate_room_id(rng=None) -> str:
    rng = rng or random
    return "".join(rng.choice(_ROOM_ALPHABET) for _ in range(ROOM_ID_LEN))


class SymbolAccumulator:
    """Sequenza di simboli del carattere in corso. Nessuna validazione sulla lunghezza."""
    def __init__(self):
        self._buf = ""

    @property
    def code(self) -> str:
        return self._buf

    def append(self, symbol: str):
        self._buf += symbol

    def clear(self):
        self._buf = ""

    def __len__(self):
        return len(self._buf)

    def __bool__(self):
        return bool(self._buf)


class SessionContext:
    def __init__(self, username: str = "", room_id: str = ""):
        self.username = username
        self.room_id  = room_id
        self.pending    = SymbolAccumulator()
        self.transcript = TranscriptBuilder()
        self.members  = frozenset()     # snapshot del relay, qui solo letto
        self.messages = []              # log in ordine di arrivo, solo append

    @classmethod
    def join(cls, username: str, room_id: str):
        username = (username or "").strip()
        room_id  = (room_id or "").strip()
        if not username or not room_id:
            raise InvalidInput("Please enter username and room ID")
        return cls(username, room_id)

    def append_message(self, msg):
        self.messages.append(msg)

    def set_members(self, usernames):
        self.members = frozenset(usernames)

    def reset(self):
        """Clear dell'utente: sequenza in corso e trascrizione. Il log chat resta."""
        self.pending.clear()
        self.transcript.clear()
