# cw/errors.py
"""
Errori del motore Morse. Sono tutti recuperabili: nessuno deve fermare il decoder.
"""

class MorseChatError(Exception):
    pass

class InvalidInput(MorseChatError):
    """Misura di pressione non valida (negativa, non numerica) o join incompleto."""

class MalformedInboundEvent(MorseChatError):
    """Evento dal relay con tipo sconosciuto o campi mancanti."""
    def __init__(self, message, event=None):
        super().__init__(message)
        self.event = event

class TransportUnavailable(MorseChatError):
    """Relay non raggiungibile: avviso non fatale, lo stato locale resta valido."""
