import pytest

from cw.session import SessionContext
from cw.tap_engine import TapEngine


class ManualScheduler:
    """Scheduler a orologio virtuale: i timer scattano solo con advance()."""
    class Handle:
        def __init__(self, due, callback):
            self.due = due
            self.callback = callback
            self.cancelled = False
            self.fired = False

        @property
        def active(self):
            return not (self.cancelled or self.fired)

        def cancel(self):
            self.cancelled = True

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def schedule(self, delay_ms, callback):
        h = self.Handle(self.now + delay_ms, callback)
        self.handles.append(h)
        return h

    def pending(self):
        return [h for h in self.handles if h.active]

    def advance(self, ms):
        end = self.now + ms
        while True:
            due = sorted((h for h in self.pending() if h.due <= end), key=lambda h: h.due)
            if not due:
                break
            h = due[0]
            self.now = h.due
            h.fired = True
            h.callback()
        self.now = end


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def session():
    return SessionContext("alice", "ROOM01")


@pytest.fixture
def effects():
    return []


@pytest.fixture
def engine(session, scheduler, effects):
    return TapEngine(session, scheduler, on_effects=effects.extend)


def tap(engine, scheduler, symbol, gap_ms=50):
    """Una pressione da 60 ms (punto) o 300 ms (linea), poi una breve pausa."""
    hold = 60 if symbol == "." else 300
    engine.press_in(scheduler.now)
    scheduler.advance(hold)
    engine.press_out(scheduler.now)
    scheduler.advance(gap_ms)
