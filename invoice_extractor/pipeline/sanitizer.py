"""Field normalization applied after extraction."""

import re
from typing import Optional

_NON_DIGITS = re.compile(r"[^0-9]+")


def sanitize_invoice_number(raw: Optional[str]) -> str:
    """
    Keep only the ASCII decimal digits of an invoice number.

    Sentinels are not special-cased: "N/A" and "Error" both become "".

    >>> sanitize_invoice_number("INV-1001")
    '1001'
    """
    return _NON_DIGITS.sub("", raw or "")
