# cw/router.py
import logging

from cw.messages import (
    parse_event, now_ms,
    PresenceJoined, PresenceLeft, RoomRoster, MorseReceived, TextReceived,
    SystemMessage, MorseMessage, TextMessage, PlayCue, CUE_SHORT, CUE_LONG,
)

logger = logging.getLogger(__name__)


class InboundRouter:
    """
    Eventi dal relay -> log chat della sessione (ordine di arrivo).
    Non tocca mai la pipeline di decodifica locale.
    route() solleva MalformedInboundEvent per forme sconosciute: il log resta com'è.
    """
    def __init__(self, session, clock=now_ms):
        self.session = session
        self.clock = clock

    def route(self, name: str, data):
        return self.dispatch(parse_event(name, data))

    def dispatch(self, ev):
        if isinstance(ev, (PresenceJoined, PresenceLeft)):
            self.session.append_message(SystemMessage(ev.text, self.clock()))
            return []
        if isinstance(ev, RoomRoster):
            self.session.set_members(ev.usernames)
            logger.debug("utenti in stanza: %d", len(ev.usernames))
            return []
        if isinstance(ev, MorseReceived):
            self.session.append_message(MorseMessage(ev.username, ev.code, ev.transcript, ev.timestamp))
            return [PlayCue(CUE_SHORT if ev.last_symbol == "." else CUE_LONG)]
        if isinstance(ev, TextReceived):
            self.session.append_message(TextMessage(ev.username, ev.text, ev.timestamp))
            return []
        raise TypeError(f"evento non gestito: {type(ev).__name__}")
