from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import pycountry
from babel.numbers import get_currency_name, get_currency_symbol

from ..exceptions import DataConversionError

"""ISO 4217 currency value used by CURRENCY cells.

The set of known currencies and their numeric codes come from pycountry.
Symbols and display names come from the Babel CLDR data for ``en_US`` so that
rendering does not depend on the process locale.
"""

__all__ = [
    "CURRENCY_LOCALE",
    "Currency",
    "available_currencies",
]

CURRENCY_LOCALE = "en_US"


@dataclass(frozen=True)
class Currency:
    """A currency identified by its ISO 4217 alphabetic code (not an amount)."""
    code: str

    def __post_init__(self) -> None:
        if self.code not in _currency_codes():
            raise DataConversionError(f"Currency with code {self.code} not found.")

    @classmethod
    def of(cls, code: str) -> Currency:
        found = _by_code().get(code)
        if found is None:
            raise DataConversionError(f"Currency with code {code} not found.")
        return found

    @property
    def symbol(self) -> str:
        return get_currency_symbol(self.code, locale=CURRENCY_LOCALE)

    @property
    def display_name(self) -> str:
        return get_currency_name(self.code, locale=CURRENCY_LOCALE)

    @property
    def numeric_code(self) -> str:
        return _numeric_by_code()[self.code]

    def __str__(self) -> str:
        return self.code


@lru_cache(maxsize=1)
def _currency_codes() -> frozenset[str]:
    return frozenset(c.alpha_3 for c in pycountry.currencies)


@lru_cache(maxsize=1)
def _numeric_by_code() -> dict[str, str]:
    return {c.alpha_3: str(c.numeric) for c in pycountry.currencies}


@lru_cache(maxsize=1)
def _by_code() -> dict[str, Currency]:
    return {code: Currency(code) for code in sorted(_currency_codes())}


def available_currencies() -> list[Currency]:
    """All known currencies ordered by code."""
    return list(_by_code().values())


@lru_cache(maxsize=1)
def currencies_by_symbol() -> dict[str, Currency]:
    # 同一シンボルが複数ある場合はコード順で先勝ち
    lookup: dict[str, Currency] = {}
    for currency in available_currencies():
        lookup.setdefault(currency.symbol, currency)
    return lookup


@lru_cache(maxsize=1)
def currencies_by_display_name() -> dict[str, Currency]:
    lookup: dict[str, Currency] = {}
    for currency in available_currencies():
        lookup.setdefault(currency.display_name, currency)
    return lookup


@lru_cache(maxsize=1)
def currencies_by_numeric_code() -> dict[str, Currency]:
    return {currency.numeric_code: currency for currency in available_currencies()}
