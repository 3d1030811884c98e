# cw/morse_table.py
"""
Tabella Morse fissa (A-Z, 0-9, spazio = "/").
Bidirezionale: MORSE_CODE carattere -> codice, MORSE_TO_CHAR codice -> carattere.
"""

MORSE_CODE = {
    "A":".-", "B":"-...", "C":"-.-.", "D":"-..", "E":".", "F":"..-.",
    "G":"--.", "H":"....", "I":"..", "J":".---", "K":"-.-", "L":".-..",
    "M":"--", "N":"-.", "O":"---", "P":".--.", "Q":"--.-", "R":".-.",
    "S":"...", "T":"-", "U":"..-", "V":"...-", "W":".--", "X":"-..-",
    "Y":"-.--", "Z":"--..",
    "0":"-----", "1":".----", "2":"..---", "3":"...--", "4":"....-",
    "5":".....", "6":"-....", "7":"--...", "8":"---..", "9":"----.",
    " ":"/",
}

MORSE_TO_CHAR = {code: ch for ch, code in MORSE_CODE.items()}


def lookup(sequence: str):
    """Solo match esatto. Codice sconosciuto -> None (non è un errore)."""
    if not sequence:
        return None
    return MORSE_TO_CHAR.get(sequence)


def encode(char: str):
    if not char:
        return None
    return MORSE_CODE.get(char.upper())
