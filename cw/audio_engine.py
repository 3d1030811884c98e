# cw/audio_engine.py
import logging
import math
import numpy as np

from cw.messages import CUE_SHORT, CUE_LONG

logger = logging.getLogger(__name__)


class CuePlayer:
    """
    Beep di conferma stile sidetone (sinusoide + attack/release morbidi).
    play_cue("short"|"long"): best effort, ogni errore audio si logga e si ignora.
    """
    def __init__(self, tone_hz: float = 600.0, samplerate: int = 48000, volume: int = 50,
                 short_s: float = 0.080, long_s: float = 0.240):
        self._sr   = int(samplerate)
        self._tone = float(tone_hz)
        self._vol  = self._map_vol(volume)
        self._attack_s  = 0.003
        self._release_s = 0.006
        self._lengths = {CUE_SHORT: float(short_s), CUE_LONG: float(long_s)}
        self._cache = {}

        self.enabled = False
        self._sd = None
        try:
            import sounddevice as sd
            self._sd = sd
            self.enabled = True
        except Exception as e:     # PortAudio assente: l'app funziona lo stesso, muta
            logger.info("audio disabilitato: %s", e)

    def render(self, kind: str) -> np.ndarray:
        if kind not in self._lengths:
            raise ValueError(f"cue sconosciuto: {kind!r}")
        buf = self._cache.get(kind)
        if buf is None:
            buf = self._cache[kind] = self._render(self._lengths[kind])
        return buf

    def play_cue(self, kind: str):
        if not self.enabled:
            return
        try:
            self._sd.play(self.render(kind), self._sr)
        except Exception as e:
            logger.debug("cue %r non riprodotto: %s", kind, e)

    def stop(self):
        if self._sd is None: return
        try: self._sd.stop()
        except Exception: pass

    # ───────── internals
    def _map_vol(self, v: int) -> float:
        v = max(0, min(100, int(v)))
        return 0.001 + 0.50 * (v/100.0)

    def _render(self, dur_s: float) -> np.ndarray:
        n = max(1, int(dur_s * self._sr))
        t = np.arange(n, dtype=np.float32) / self._sr
        wave = np.sin(2.0 * math.pi * self._tone * t, dtype=np.float32)

        env = np.ones(n, dtype=np.float32)
        na = min(n, max(1, int(self._attack_s * self._sr)))
        nr = min(n - na, max(1, int(self._release_s * self._sr)))
        env[:na] = np.linspace(0.0, 1.0, na, dtype=np.float32)
        if nr > 0:
            env[n-nr:] = np.linspace(1.0, 0.0, nr, dtype=np.float32)

        return np.tanh(self._vol * env * wave).astype(np.float32)
