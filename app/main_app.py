# app/main_app.py
import sys
import logging
from PyQt5.QtWidgets import QApplication, QMainWindow, QWidget, QMessageBox
from PyQt5.QtCore import QTimer, QObject, pyqtSignal

from app import config
from app.ui_layout import build_ui, WINDOW_SIZE

from net.relay_client import RelayClient
from cw.audio_engine import CuePlayer
from cw.errors import InvalidInput, MalformedInboundEvent, TransportUnavailable
from cw.messages import PlayCue, Transmit, SystemMessage, MorseMessage, TextMessage
from cw.router import InboundRouter
from cw.scheduler import QtScheduler
from cw.session import SessionContext, generate_room_id
from cw.tap_engine import TapEngine
from cw.tx_input import TxInput

logger = logging.getLogger(__name__)

JOIN_PAGE, CHAT_PAGE = 0, 1

def format_message(msg) -> str:
    if isinstance(msg, SystemMessage):
        return f"— {msg.text} —"
    if isinstance(msg, MorseMessage):
        return f"{msg.sender}:  {msg.code}\n    {msg.text}"
    if isinstance(msg, TextMessage):
        return f"{msg.sender}:  {msg.text}"
    raise TypeError(f"messaggio sconosciuto: {type(msg).__name__}")

class UiBus(QObject):
    # il primo argomento è il client che ha emesso: quelli sostituiti vengono ignorati
    relay_event  = pyqtSignal(object, str, object)
    relay_status = pyqtSignal(object, bool)
    relay_error  = pyqtSignal(object, object)

def bind_relay(client, bus):
    """Callback del client -> segnali del bus, etichettate con il client."""
    client.on_event  = lambda name, data: bus.relay_event.emit(client, name, data)
    client.on_status = lambda ok: bus.relay_status.emit(client, ok)
    client.on_error  = lambda exc: bus.relay_error.emit(client, exc)
    return client

class MainWindow(QMainWindow):
    def __init__(self, app, server_url=None):
        super().__init__()
        self.setWindowTitle("Morse Code Chat"); self.setFixedSize(*WINDOW_SIZE)
        self.app = app
        self.server_url = server_url or config.server_url()

        central = QWidget(); self.setCentralWidget(central)
        self.ui = build_ui(central)

        # Stato di sessione (creato al join)
        self.session = None
        self.engine  = None
        self.router  = None
        self.client  = None
        self._rendered = 0

        self.scheduler = QtScheduler(self)
        self.audio = CuePlayer(tone_hz=config.TONE_HZ, samplerate=config.SAMPLERATE, volume=config.volume())

        # Bus segnali UI (thread Socket.IO -> thread Qt)
        self._bus = UiBus()
        self._bus.relay_event.connect(self._on_relay_event)
        self._bus.relay_status.connect(self._on_relay_status)
        self._bus.relay_error.connect(self._on_relay_error)

        # Spacebar = tasto
        self.tx_input = TxInput(self.app)
        self.tx_input.bind_spacebar(self._on_press_in, self._on_press_out, enabled=self._space_enabled)

        self._wire_ui()

        self._ui_timer = QTimer(self); self._ui_timer.setInterval(33)
        self._ui_timer.timeout.connect(self._ui_tick); self._ui_timer.start()

    # ─────────────────────────── helpers
    def _wire_ui(self):
        self.ui["btn_generate"].clicked.connect(self._on_generate)
        self.ui["btn_join"].clicked.connect(self._on_join)
        self.ui["btn_leave"].clicked.connect(self._on_leave)
        self.ui["btn_clear"].clicked.connect(self._on_clear)
        self.ui["btn_send"].clicked.connect(self._on_send)
        self.ui["text_input"].returnPressed.connect(self._on_send)
        self.ui["tap_key"].pressed.connect(self._on_press_in)
        self.ui["tap_key"].released.connect(self._on_press_out)

    def _space_enabled(self) -> bool:
        return (self.engine is not None
                and self.ui["stack"].currentIndex() == CHAT_PAGE
                and not self.ui["text_input"].hasFocus())

    def _notice(self, text: str):
        """Avviso non fatale (rete giù ecc.)."""
        self.statusBar().showMessage(text, 5000)

    # ─────────────────────────── join / leave
    def _on_generate(self):
        self.ui["room_input"].setText(generate_room_id())

    def _on_join(self):
        try:
            session = SessionContext.join(self.ui["username_input"].text(), self.ui["room_input"].text())
        except InvalidInput as e:
            QMessageBox.warning(self, "Error", str(e))
            return
        self._start_session(session)
        self.ui["stack"].setCurrentIndex(CHAT_PAGE)
        self._notice(f"Connecting to {self.server_url} …")

    def _start_session(self, session):
        self._stop_session()
        self.session = session
        self.engine  = TapEngine(session, self.scheduler, on_effects=self._perform)
        self.router  = InboundRouter(session)
        self._rendered = 0
        self.ui["messages_box"].clear()
        self.ui["header_title"].setText(f"Room: {session.room_id}")
        self.ui["header_users"].setText("👤 0 online")

        self.client = bind_relay(RelayClient(self.server_url, session.room_id, session.username), self._bus)
        self.client.start()

    def _stop_session(self):
        if self.engine:
            self.engine.clear()
        if self.client:
            self.client.stop()
        self.client = None
        self.engine = self.router = self.session = None

    def _on_leave(self):
        self._stop_session()
        self.ui["stack"].setCurrentIndex(JOIN_PAGE)

    # ─────────────────────────── tasto
    def _on_press_in(self, t_ms: float):
        if not self.engine: return
        self.ui["tap_key"].set_visual_down(True)
        self._perform(self.engine.press_in(t_ms))

    def _on_press_out(self, t_ms: float):
        if not self.engine: return
        self.ui["tap_key"].set_visual_down(False)
        try:
            effects = self.engine.press_out(t_ms)
        except InvalidInput as e:
            logger.debug("rilascio scartato: %s", e)
            return
        self._perform(effects)

    def _on_clear(self):
        if self.engine:
            self.engine.clear()

    def _on_send(self):
        text = self.ui["text_input"].text().strip()
        if not text or not self.client: return
        try:
            self.client.send_message(text)
        except TransportUnavailable as e:
            self._notice(str(e))
            return
        self.ui["text_input"].clear()

    # ─────────────────────────── effetti
    def _perform(self, effects):
        for eff in effects:
            if isinstance(eff, PlayCue):
                self.audio.play_cue(eff.kind)
            elif isinstance(eff, Transmit):
                if not self.client:
                    continue
                try:
                    self.client.transmit(eff.last_symbol, eff.code, eff.transcript)
                except TransportUnavailable as e:
                    logger.warning("%s", e)
                    self._notice(str(e))

    # ─────────────────────────── relay (thread Qt)
    def _on_relay_event(self, client, name: str, data):
        if client is not self.client or not self.router: return
        try:
            effects = self.router.route(name, data)
        except MalformedInboundEvent as e:
            logger.warning("evento scartato: %s", e)
            self._notice(f"Ignored malformed event: {name}")
            return
        self._perform(effects)
        self._render_new_messages()
        self.ui["header_users"].setText(f"👤 {len(self.session.members)} online")

    def _on_relay_status(self, client, connected: bool):
        if client is not self.client: return
        self._notice("Connected" if connected else "Disconnected")

    def _on_relay_error(self, client, exc):
        if client is not self.client: return
        self._notice(str(exc))

    def _render_new_messages(self):
        box = self.ui["messages_box"]
        for msg in self.session.messages[self._rendered:]:
            box.appendPlainText(format_message(msg))
        self._rendered = len(self.session.messages)

    # ─────────────────────────── UI tick
    def _ui_tick(self):
        if not self.engine: return
        self.ui["morse_display"].setText(self.engine.pending)
        self.ui["text_display"].setText(self.engine.transcript)

    def closeEvent(self, e):
        self._stop_session()
        self.tx_input.unbind()
        self.audio.stop()
        super().closeEvent(e)

def main():
    config.setup_logging()
    app = QApplication(sys.argv)
    w = MainWindow(app); w.show()
    sys.exit(app.exec_())

if __name__ == "__main__":
    main()
