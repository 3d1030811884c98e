# cw/tx_input.py
"""
Tasto da tastiera:
- Spacebar come tasto Morse (premi = press_in, rilascia = press_out) con debounce.
- L'autorepeat del sistema viene ignorato: una pressione lunga resta UNA linea.
- I campi di testo con focus si tengono lo spazio (decide enabled()).
Le callback ricevono l'istante in ms (perf_counter).
"""
from time import perf_counter
from PyQt5.QtCore import QObject, QEvent, Qt

class TapKeyFilter(QObject):
    def __init__(self, on_down, on_up, key=Qt.Key_Space, debounce_ms=2, enabled=None):
        super().__init__()
        self.on_down = on_down
        self.on_up   = on_up
        self.key     = key
        self.debounce = debounce_ms/1000.0
        self.enabled = enabled or (lambda: True)
        self._last = 0.0
        self._pressed = False

    def eventFilter(self, obj, ev):
        t = ev.type()
        if t not in (QEvent.KeyPress, QEvent.KeyRelease) or ev.key() != self.key:
            return False
        if ev.isAutoRepeat():
            return self._pressed
        if not self._pressed and not self.enabled():
            return False
        now = perf_counter()
        if t == QEvent.KeyPress:
            if (now - self._last) >= self.debounce and not self._pressed:
                self._pressed = True
                self._last = now
                self.on_down(now * 1000.0)
            return True
        if self._pressed:
            self._pressed = False
            self._last = now
            self.on_up(now * 1000.0)
            return True
        return False

class TxInput:
    def __init__(self, app):
        self.app = app
        self._filter = None

    def bind_spacebar(self, on_down, on_up, enabled=None):
        self.unbind()
        self._filter = TapKeyFilter(on_down, on_up, enabled=enabled)
        self.app.installEventFilter(self._filter)

    def unbind(self):
        if self._filter:
            self.app.removeEventFilter(self._filter)
            self._filter = None
