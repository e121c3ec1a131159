from __future__ import annotations

from collections.abc import Mapping

from dashboard.domain.errors import UnmappedSymbolError


class CryptoSymbolResolver:
    """Maps crypto pair symbols such as ``BTC-USD`` to provider coin ids."""

    def __init__(self, coin_ids: Mapping[str, str]) -> None:
        self._coin_ids = {symbol.strip().upper(): coin_id for symbol, coin_id in coin_ids.items()}

    def resolve(self, symbol: str) -> str:
        coin_id = self._coin_ids.get(symbol.upper())
        if coin_id is None:
            raise UnmappedSymbolError(symbol)
        return coin_id
