# cw/scheduler.py
"""
Timer one-shot cancellabili sull'event loop Qt (un solo thread: niente lock).
  h = QtScheduler().schedule(800, callback)
  h.cancel()
"""
from PyQt5.QtCore import QObject, QTimer


class TimerHandle:
    def __init__(self, timer: QTimer):
        self._timer = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class QtScheduler(QObject):
    def __init__(self, parent=None):
        super().__init__(parent)

    def schedule(self, delay_ms: float, callback) -> TimerHandle:
        t = QTimer(self)
        t.setSingleShot(True)
        t.setInterval(max(0, int(delay_ms)))
        handle = TimerHandle(t)

        def _fire():
            handle.cancel()
            callback()

        t.timeout.connect(_fire)
        t.start()
        return handle
