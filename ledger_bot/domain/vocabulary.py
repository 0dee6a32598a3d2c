"""Static lookup tables for command words and month names"""

import re
from types import MappingProxyType
from typing import Optional

TYPE_MAP = MappingProxyType({
    "ingreso": "income",
    "gasto": "outgo",
})

INVERSE_TYPE_MAP = MappingProxyType({v: k for k, v in TYPE_MAP.items()})

MONTH_NAMES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)

MONTH_MAP = MappingProxyType({
    **{name: number for number, name in enumerate(MONTH_NAMES, start=1)},
    "setiembre": 9,
})


def translate_type(word: str) -> Optional[str]:
    """Map a command word (or an already mapped value) to a stored type"""
    normalized = word.strip().lower()
    if normalized in TYPE_MAP:
        return TYPE_MAP[normalized]
    if normalized in INVERSE_TYPE_MAP:
        return normalized
    return None


def month_number(token: str) -> Optional[int]:
    """Return 1-12 for a month name or numeric token, None otherwise"""
    normalized = token.strip().lower()
    if normalized in MONTH_MAP:
        return MONTH_MAP[normalized]
    if re.fullmatch(r"[0-9]{1,2}", normalized) and 1 <= int(normalized) <= 12:
        return int(normalized)
    return None


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]
