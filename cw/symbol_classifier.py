# cw/symbol_classifier.py
import math
from numbers import Real

from cw.errors import InvalidInput

DOT  = "."
DASH = "-"
SYMBOLS = (DOT, DASH)

DASH_THRESHOLD_MS = 200.0     # < soglia -> punto, >= soglia -> linea


def classify(duration_ms, threshold_ms: float = DASH_THRESHOLD_MS) -> str:
    """
    Durata della pressione (ms) -> "." oppure "-".
    Anche un tap istantaneo (0 ms) è un punto.
    """
    if isinstance(duration_ms, bool) or not isinstance(duration_ms, Real):
        raise InvalidInput(f"durata non numerica: {duration_ms!r}")
    dur = float(duration_ms)
    if math.isnan(dur) or math.isinf(dur) or dur < 0:
        raise InvalidInput(f"durata non valida: {duration_ms!r}")
    return DOT if dur < threshold_ms else DASH
