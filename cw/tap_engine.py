# cw/tap_engine.py
"""
TapEngine
---------
Dal tasto (pressioni/rilasci) ai caratteri, con il doppio timeout:

  press_in(t)  -> cue breve + sospende i timer in corso (una pressione lunga non
                  viene mai decodificata a metà)
  press_out(t) -> classifica la durata in "."/"-", accoda il simbolo e riarma:
                  - decode timer (800 ms): prova la tabella sulla sequenza fotografata
                    all'armo; se trova il carattere -> trascrizione + Transmit
                  - stale timer (2000 ms, stesso riferimento): svuota la sequenza
                    comunque vada

Ogni nuovo simbolo cancella la coppia precedente e incrementa la generazione:
un timer scattato in ritardo si accorge di essere superato e non fa nulla.

I metodi pubblici restituiscono la lista di effetti da eseguire; gli effetti
prodotti dai timer vanno a on_effects(effects).
"""
import logging
from time import perf_counter

from cw import morse_table
from cw.errors import InvalidInput
from cw.messages import PlayCue, CUE_SHORT
from cw.symbol_classifier import classify, DASH_THRESHOLD_MS, SYMBOLS

logger = logging.getLogger(__name__)

DECODE_DELAY_MS = 800
STALE_DELAY_MS  = 2000

IDLE         = "IDLE"
ACCUMULATING = "ACCUMULATING"


class TapEngine:
    def __init__(self, session, scheduler, on_effects=None,
                 dash_threshold_ms: float = DASH_THRESHOLD_MS,
                 decode_delay_ms: float = DECODE_DELAY_MS,
                 stale_delay_ms: float = STALE_DELAY_MS,
                 lookup=morse_table.lookup):
        self.session    = session
        self.scheduler  = scheduler
        self.on_effects = on_effects
        self.lookup     = lookup

        self._dash_thr  = float(dash_threshold_ms)
        self._decode_ms = float(decode_delay_ms)
        self._stale_ms  = float(stale_delay_ms)

        self._generation = 0
        self._decode_timer = None
        self._stale_timer  = None
        self._press_start  = None

    # ---------- stato ----------
    @property
    def state(self) -> str:
        return ACCUMULATING if self.session.pending else IDLE

    @property
    def pending(self) -> str:
        return self.session.pending.code

    @property
    def transcript(self) -> str:
        return self.session.transcript.text

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_pressed(self) -> bool:
        return self._press_start is not None

    def timers_outstanding(self) -> int:
        return sum(1 for h in (self._decode_timer, self._stale_timer) if h is not None)

    # ---------- API ----------
    def press_in(self, t_ms: float = None):
        if t_ms is None:
            t_ms = perf_counter() * 1000.0
        self._press_start = t_ms
        self._cancel_timers()
        return [PlayCue(CUE_SHORT)]

    def press_out(self, t_ms: float = None):
        if t_ms is None:
            t_ms = perf_counter() * 1000.0
        if self._press_start is None:
            raise InvalidInput("rilascio senza pressione")
        start = self._press_start
        try:
            symbol = classify(t_ms - start, self._dash_thr)
        except TypeError:
            raise InvalidInput(f"istante di rilascio non valido: {t_ms!r}") from None
        self._press_start = None
        return self.add_symbol(symbol)

    def add_symbol(self, symbol: str):
        if symbol not in SYMBOLS:
            raise InvalidInput(f"simbolo non valido: {symbol!r}")
        self.session.pending.append(symbol)
        self._arm(self.session.pending.code)
        return []

    def clear(self):
        """Reset utente: timer cancellati (non solo ignorati), sequenza e testo vuoti."""
        self._cancel_timers()
        self._press_start = None
        self.session.reset()
        return []

    # ---------- timer ----------
    def _cancel_timers(self):
        self._generation += 1
        for h in (self._decode_timer, self._stale_timer):
            if h is not None:
                h.cancel()
        self._decode_timer = self._stale_timer = None

    def _arm(self, snapshot: str):
        self._cancel_timers()
        gen = self._generation
        self._decode_timer = self.scheduler.schedule(
            self._decode_ms, lambda: self._on_decode_timer(gen, snapshot))
        self._stale_timer = self.scheduler.schedule(
            self._stale_ms, lambda: self._on_stale_timer(gen))

    def _on_decode_timer(self, gen: int, snapshot: str):
        if gen != self._generation:
            return
        self._decode_timer = None
        ch = self.lookup(snapshot)
        if ch is None:
            # codice sconosciuto: resta lì finché non scade o arrivano altri simboli
            logger.debug("nessun carattere per %r", snapshot)
            return
        tx = self.session.transcript.on_decoded(ch, snapshot)
        self.session.pending.clear()
        logger.debug("decodificato %r -> %r", snapshot, ch)
        self._emit([tx])

    def _on_stale_timer(self, gen: int):
        if gen != self._generation:
            return
        self._stale_timer = None
        if self.session.pending:
            logger.debug("sequenza scaduta: %r", self.session.pending.code)
        self.session.pending.clear()

    def _emit(self, effects):
        if effects and self.on_effects:
            try:
                self.on_effects(effects)
            except Exception:
                logger.exception("errore eseguendo gli effetti %r", effects)
