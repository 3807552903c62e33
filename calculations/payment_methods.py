"""
Payment Method Normalization
Maps raw ERP payment labels ("TEF Débito", "01 - PIX", "Carnê") onto PaymentMethod
"""

import logging
import unicodedata
from typing import FrozenSet, Iterable, Optional, Union

from .entities import PaymentMethod

logger = logging.getLogger(__name__)

# Checked in order; first keyword hit wins
_METHOD_KEYWORDS = (
    (PaymentMethod.PIX, ("pix",)),
    (PaymentMethod.DINHEIRO, ("dinheiro", "especie")),
    (PaymentMethod.DEBITO, ("debito",)),
    (PaymentMethod.CREDITO, ("credito",)),
    (PaymentMethod.CREDIARIO, ("crediario", "carne")),
)


def fold_text(value: str) -> str:
    """Lower-case and strip accents"""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower().strip()


def normalize_payment_method(raw: Union[PaymentMethod, str, None]) -> Optional[PaymentMethod]:
    """
    Resolve a raw payment label to a PaymentMethod

    Returns:
        PaymentMethod, or None for labels outside the tracked methods (boleto, transferência, ...)
    """
    if isinstance(raw, PaymentMethod):
        return raw
    if not raw:
        return None

    label = fold_text(str(raw))
    for method, keywords in _METHOD_KEYWORDS:
        if any(keyword in label for keyword in keywords):
            return method

    logger.debug(f"Payment method {raw!r} is not tracked by cashier goals")
    return None


def normalize_payment_methods(raw_methods: Optional[Iterable[Union[PaymentMethod, str]]]) -> FrozenSet[PaymentMethod]:
    methods = (normalize_payment_method(m) for m in (raw_methods or ()))
    return frozenset(m for m in methods if m is not None)
