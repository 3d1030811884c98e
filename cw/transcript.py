# cw/transcript.py
from cw.messages import Transmit


class TranscriptBuilder:
    """
    Testo decodificato del messaggio in composizione (solo append, si svuota con clear()).
    Ogni evento in uscita porta il testo INTERO fino a qui: chi riceve non accumula nulla.
    """
    def __init__(self):
        self._chars = []

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def __len__(self):
        return len(self._chars)

    def on_decoded(self, char: str, code: str) -> Transmit:
        self._chars.append(char)
        return Transmit(last_symbol=code[-1], code=code, transcript=self.text)

    def clear(self):
        self._chars.clear()
