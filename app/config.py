# app/config.py
"""
Configurazione: default qui, override da variabili d'ambiente.
  MORSE_CHAT_SERVER_URL   indirizzo del relay Socket.IO
  MORSE_CHAT_LOG_LEVEL    DEBUG / INFO / WARNING ...
  MORSE_CHAT_VOLUME       0..100
"""
import logging
import os

DEFAULT_SERVER_URL = "http://192.168.1.100:3000"   # cambiare con l'IP del proprio server
DEFAULT_LOG_LEVEL  = "INFO"
DEFAULT_VOLUME     = 55
TONE_HZ            = 600.0
SAMPLERATE         = 48000

def _env_int(name, default, lo, hi):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return max(lo, min(hi, int(raw)))
    except ValueError:
        logging.getLogger(__name__).warning("%s=%r non valido, uso %s", name, raw, default)
        return default

def server_url() -> str:
    return os.environ.get("MORSE_CHAT_SERVER_URL", "").strip() or DEFAULT_SERVER_URL

def log_level() -> int:
    name = os.environ.get("MORSE_CHAT_LOG_LEVEL", "").strip().upper() or DEFAULT_LOG_LEVEL
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO

def volume() -> int:
    return _env_int("MORSE_CHAT_VOLUME", DEFAULT_VOLUME, 0, 100)

def setup_logging(level=None):
    logging.basicConfig(
        level=log_level() if level is None else level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
