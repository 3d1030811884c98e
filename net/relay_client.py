# net/relay_client.py
"""
Client del relay chat (Socket.IO):
- al connect entra nella stanza (join-room {roomId, username})
- inoltra OGNI evento ricevuto a on_event(name, data), anche quelli sconosciuti:
  decide il router se sono validi
- transmit(...) -> send-morse, send_message(...) -> send-message (fire-and-forget)
- errori di rete -> TransportUnavailable (sincrono) o on_error(exc) (thread)
- start() ritenta il primo connect con backoff; dopo stop() il client tace:
  niente join-room, niente eventi, anche se un connect in volo finisce dopo

Le callback arrivano dal thread di Socket.IO: chi aggiorna la UI deve riportarle
sul thread Qt (vedi app.main_app.UiBus).
"""
import logging
import threading

import socketio
from socketio import exceptions as sio_exc

from cw.errors import TransportUnavailable
from cw.messages import WIRE_EVENTS

logger = logging.getLogger(__name__)


def _clean_url(u: str) -> str:
    u = (u or "").strip().rstrip("/")
    if u and "://" not in u:
        u = "http://" + u
    return u


class RelayClient:
    def __init__(self, url: str, room_id: str, username: str,
                 on_event=None, on_status=None, on_error=None,
                 connect_timeout: float = 5.0, retry_delay: float = 1.0,
                 max_retry_delay: float = 30.0, sio=None):
        self.url      = _clean_url(url)
        self.room_id  = room_id
        self.username = username

        self.on_event  = on_event
        self.on_status = on_status
        self.on_error  = on_error
        self._timeout  = float(connect_timeout)
        self._retry_delay = float(retry_delay)
        self._max_retry_delay = float(max_retry_delay)

        self.sio = sio if sio is not None else socketio.Client(reconnection=True, logger=False)
        self._stopped = threading.Event()
        self._thr = None
        self._register()

    # ---------- API ----------
    @property
    def connected(self) -> bool:
        return bool(self.sio.connected)

    def connect(self):
        if not self.url:
            raise TransportUnavailable("indirizzo del server mancante")
        try:
            self.sio.connect(self.url, wait_timeout=self._timeout)
        except sio_exc.ConnectionError as e:
            raise TransportUnavailable(f"server non raggiungibile: {self.url} ({e})") from e

    def start(self):
        """connect() in background, ritentato con backoff fino a stop(); esito su on_status / on_error."""
        self._stopped.clear()
        self._thr = threading.Thread(target=self._run, daemon=True)
        self._thr.start()

    def stop(self, join_timeout: float = 1.0):
        self._stopped.set()
        self._disconnect()
        thr = self._thr
        if thr is not None and thr is not threading.current_thread():
            thr.join(timeout=join_timeout)

    def transmit(self, last_symbol: str, code: str, transcript: str):
        self._emit("send-morse", {
            "roomId": self.room_id,
            "morseSignal": last_symbol,
            "morseCode": code,
            "text": transcript,
        })

    def send_message(self, text: str):
        self._emit("send-message", {"roomId": self.room_id, "message": text})

    # ---------- interni ----------
    def _run(self):
        delay = self._retry_delay
        reported = False
        while not self._stopped.is_set():
            try:
                self.connect()
                break
            except TransportUnavailable as e:
                logger.warning("%s (nuovo tentativo tra %.1f s)", e, delay)
                if not reported:          # avviso solo al primo fallimento
                    self._report(e)
                    reported = True
            if self._stopped.wait(delay):
                return
            delay = min(self._max_retry_delay, delay * 2)
        # connect() finito dopo stop(): si chiude subito
        if self._stopped.is_set():
            self._disconnect()

    def _disconnect(self):
        try:
            self.sio.disconnect()
        except Exception as e:
            logger.debug("disconnect: %s", e)

    def _emit(self, event: str, payload: dict):
        if not self.sio.connected:
            raise TransportUnavailable(f"non connesso: {event} non inviato")
        try:
            self.sio.emit(event, payload)
        except sio_exc.SocketIOError as e:
            raise TransportUnavailable(f"{event} non inviato: {e}") from e

    def _register(self):
        self.sio.on("connect", self._on_connect)
        self.sio.on("disconnect", self._on_disconnect)
        self.sio.on("connect_error", self._on_connect_error)
        for name in WIRE_EVENTS:
            self.sio.on(name, self._forwarder(name))
        self.sio.on("*", self._on_any)

    def _forwarder(self, name):
        def _handler(data=None):
            self._deliver(name, data)
        return _handler

    def _on_any(self, event, *args):
        # eventi sconosciuti, anche con più argomenti: il router li segnala come malformati
        self._deliver(event, args[0] if args else None)

    def _deliver(self, name, data):
        if self._stopped.is_set():
            return
        if self.on_event:
            self.on_event(name, data)

    def _on_connect(self):
        if self._stopped.is_set():
            logger.info("connesso dopo stop(): chiudo %s", self.url)
            return
        logger.info("connesso a %s, stanza %s", self.url, self.room_id)
        try:
            self.sio.emit("join-room", {"roomId": self.room_id, "username": self.username})
        except sio_exc.SocketIOError as e:
            self._report(TransportUnavailable(f"join-room non inviato: {e}"))
            return
        if self.on_status:
            self.on_status(True)

    def _on_disconnect(self, *args):
        logger.info("disconnesso da %s", self.url)
        if self.on_status:
            self.on_status(False)

    def _on_connect_error(self, data=None):
        if self._stopped.is_set():
            return
        self._report(TransportUnavailable(f"errore di connessione: {data}"))

    def _report(self, exc):
        if self.on_error:
            self.on_error(exc)
