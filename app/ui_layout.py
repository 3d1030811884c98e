# app/ui_layout.py
from PyQt5.QtWidgets import QWidget, QLabel, QLineEdit, QPlainTextEdit, QPushButton, QStackedWidget
from PyQt5.QtCore import Qt
from app.widgets.tap_key import TapKey

WINDOW_SIZE = (420, 760)

BG       = "#0a0e27"
PANEL    = "#1a1f3a"
GREEN    = "#4CAF50"
BLUE     = "#2196F3"
RED      = "#f44336"
GOLD     = "#FFD700"
GREY     = "#888"

JOIN_COORDS = dict(
    title        =( 20, 180, 380,  50),
    subtitle     =( 20, 235, 380,  30),
    username     =( 20, 300, 380,  48),
    room_id      =( 20, 360, 310,  48),
    btn_generate =(340, 360,  60,  48),
    info         =( 20, 420, 380,  40),
    btn_join     =( 20, 480, 380,  56),
)

CHAT_COORDS = dict(
    header_title =( 15,  10, 300,  28),
    header_users =( 15,  40, 300,  22),
    btn_leave    =(320,  15,  85,  36),
    messages     =( 15,  75, 390, 300),
    text_input   =( 15, 385, 300,  36),
    btn_send     =(320, 385,  85,  36),
    morse_display=( 15, 435, 390,  40),
    text_display =( 15, 475, 390,  34),
    tap_key      =( 15, 520, 390, 150),
    tap_hint     =( 15, 672, 390,  20),
    btn_clear    =( 15, 700, 390,  44),
)

def _input(parent, placeholder, coords):
    w = QLineEdit(parent); w.setPlaceholderText(placeholder)
    w.setGeometry(*coords)
    w.setStyleSheet("background:#fff; color:#111; border-radius:10px; padding:8px; font-size:16px;")
    return w

def _button(parent, text, coords, color):
    b = QPushButton(text, parent); b.setGeometry(*coords)
    b.setCursor(Qt.PointingHandCursor)
    b.setStyleSheet(f"background:{color}; color:#fff; border-radius:10px; font: bold 16px;")
    return b

def _label(parent, text, coords, style, align=Qt.AlignCenter):
    l = QLabel(text, parent); l.setGeometry(*coords)
    l.setAlignment(align); l.setStyleSheet(style)
    return l

def build_join_page(widgets):
    page = QWidget(); page.setStyleSheet(f"background:{BG};")
    c = JOIN_COORDS
    widgets["join_title"] = _label(page, "📡 Morse Code Chat", c["title"], "color:#fff; font: bold 30px;")
    widgets["join_subtitle"] = _label(page, "Communicate with beeps!", c["subtitle"], f"color:{GREY}; font-size:17px;")
    widgets["username_input"] = _input(page, "Enter your name", c["username"])
    widgets["room_input"] = _input(page, "Enter or create room ID", c["room_id"])
    widgets["btn_generate"] = _button(page, "🎲", c["btn_generate"], BLUE)
    info = _label(page, "💡 Share the same Room ID with your friend to connect!", c["info"],
                  f"color:{GREY}; font-size:13px;")
    info.setWordWrap(True)
    widgets["btn_join"] = _button(page, "Join Room", c["btn_join"], GREEN)
    return page

def build_chat_page(widgets):
    page = QWidget(); page.setStyleSheet(f"background:{BG};")
    c = CHAT_COORDS
    header = QLabel(page); header.setGeometry(0, 0, WINDOW_SIZE[0], 68)
    header.setStyleSheet(f"background:{PANEL}; border-bottom:2px solid {GREEN};")

    widgets["header_title"] = _label(page, "Room:", c["header_title"], "color:#fff; font: bold 19px; background:transparent;",
                                     Qt.AlignLeft | Qt.AlignVCenter)
    widgets["header_users"] = _label(page, "👤 0 online", c["header_users"], f"color:{GREY}; font-size:13px; background:transparent;",
                                     Qt.AlignLeft | Qt.AlignVCenter)
    widgets["btn_leave"] = _button(page, "Leave", c["btn_leave"], RED)

    box = QPlainTextEdit(page); box.setGeometry(*c["messages"]); box.setReadOnly(True)
    box.setStyleSheet(f"background:{PANEL}; color:#fff; border-radius:8px; padding:6px; font-size:14px;")
    widgets["messages_box"] = box

    widgets["text_input"] = _input(page, "Type a message", c["text_input"])
    widgets["btn_send"] = _button(page, "Send", c["btn_send"], BLUE)

    widgets["morse_display"] = _label(page, "", c["morse_display"],
                                      f"background:{PANEL}; color:{GOLD}; font: 24px 'Consolas', monospace;")
    widgets["text_display"] = _label(page, "", c["text_display"], f"background:{PANEL}; color:#fff; font-size:18px;")

    widgets["tap_key"] = TapKey(size=(c["tap_key"][2], c["tap_key"][3]), parent=page)
    widgets["tap_key"].setGeometry(*c["tap_key"])
    _label(page, "Short tap = dot • Long press = dash —   (or hold SPACE)", c["tap_hint"], f"color:{GREY}; font-size:11px;")

    widgets["btn_clear"] = _button(page, "Clear", c["btn_clear"], RED)
    return page

def build_ui(parent: QWidget):
    """Crea le due schermate (join, chat) in uno stack e restituisce i widget."""
    widgets = {}
    stack = QStackedWidget(parent); stack.setGeometry(0, 0, *WINDOW_SIZE)
    widgets["join_page"] = build_join_page(widgets)
    widgets["chat_page"] = build_chat_page(widgets)
    stack.addWidget(widgets["join_page"]); stack.addWidget(widgets["chat_page"])
    widgets["stack"] = stack
    return widgets
