from __future__ import annotations

import re

from dashboard.domain.errors import ValidationError

_CRYPTO_PAIR_PATTERN = re.compile(r"^[A-Z0-9]+-USD$")
CRYPTO_SEPARATOR = "-"
MAX_SYMBOL_LENGTH = 20


def normalize_symbol(symbol: str) -> str:
    normalized = symbol.strip().upper()
    if not normalized:
        raise ValidationError("Symbol is required", details={"symbol": symbol})
    if len(normalized) > MAX_SYMBOL_LENGTH:
        raise ValidationError(
            f"Symbol must be at most {MAX_SYMBOL_LENGTH} characters",
            details={"symbol": symbol},
        )
    return normalized


def is_crypto_symbol(symbol: str) -> bool:
    return CRYPTO_SEPARATOR in symbol or bool(_CRYPTO_PAIR_PATTERN.fullmatch(symbol))
