# app/widgets/tap_key.py
import os
from time import perf_counter
from PyQt5.QtWidgets import QLabel
from PyQt5.QtGui import QPixmap, QColor
from PyQt5.QtCore import Qt, pyqtSignal

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
ASSETS_DIR   = os.path.join(PROJECT_ROOT, "assets", "images")

IDLE_COLOR    = QColor(76, 175, 80)
PRESSED_COLOR = QColor(69, 160, 73)

class TapKey(QLabel):
    """
    Tasto Morse a schermo: pressed(t_ms) / released(t_ms) con istante perf_counter in ms.
    Usa tap_off.png / tap_on.png se presenti negli asset, altrimenti un colore pieno.
    """
    pressed  = pyqtSignal(float)
    released = pyqtSignal(float)

    def __init__(self, size, off_path="tap_off.png", on_path="tap_on.png", parent=None):
        super().__init__(parent)
        self._off, self._on = off_path, on_path
        self._down = False
        self.setScaledContents(True)
        self.setCursor(Qt.PointingHandCursor)
        self.setAlignment(Qt.AlignCenter)
        self.setFixedSize(*size)
        self._refresh()

    def mousePressEvent(self, e):
        if e.button() == Qt.LeftButton and not self._down:
            self._down = True; self._refresh()
            self.pressed.emit(perf_counter() * 1000.0)

    def mouseReleaseEvent(self, e):
        if e.button() == Qt.LeftButton and self._down:
            self._down = False; self._refresh()
            self.released.emit(perf_counter() * 1000.0)

    def set_visual_down(self, v: bool):
        """Solo grafica (es. quando preme la spacebar)."""
        self._down = bool(v); self._refresh()

    def _refresh(self):
        path = self._on if self._down else self._off
        full = os.path.join(ASSETS_DIR, path)
        pm = QPixmap(full) if os.path.exists(full) else QPixmap()
        if not pm.isNull():
            self.setText("")
            self.setPixmap(pm.scaled(self.size(), Qt.IgnoreAspectRatio, Qt.SmoothTransformation))
            return
        c = PRESSED_COLOR if self._down else IDLE_COLOR
        self.setStyleSheet(f"background:{c.name()}; color:#fff; border-radius:20px; font: bold 36px;")
        self.setText("🔊" if self._down else "TAP")
