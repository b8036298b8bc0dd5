# ==============================================================================
# salesbi/calculator/normalizer.py
# ------------------------------------------------------------------------------
# Turns human-entered currency text ("R$ 1.234,56") into a float.
# Total function: anything that cannot be read as a finite number becomes 0.
# ==============================================================================

import math
import unicodedata


def _strip_text(text):
    text = text.replace('R$', '')
    return ''.join(
        ch for ch in text
        if not ch.isspace() and ch != '.' and unicodedata.category(ch) != 'Sc'
    )


def normalize_amount(value):
    """
    Parses a pt-BR formatted amount. '.' is a thousands separator and ','
    the decimal mark. Numbers pass through; None, empty or malformed text
    yields 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    cleaned = _strip_text(str(value)).replace(',', '.')
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_canonical_string(value):
    """Renders a number the way normalize_amount() reads it back: '1234,5'."""
    return repr(normalize_amount(value)).replace('.', ',')
