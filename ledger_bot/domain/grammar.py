"""Parsers for the fixed free-text command grammar"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, Union

from ledger_bot.domain.exceptions import InvalidFormatError

_WHITESPACE = re.compile(r"\s+")

# Largest amount the Integer and Numeric(12, 2) columns can both hold
MAX_AMOUNT = 999_999_999

# One installment per month, ten years at most
MAX_INSTALLMENTS = 120

# "<amount> <rest>": amount is a non-negative integer
_TRANSACTION_ARGS = re.compile(r"^(\d+)\s+(.*)$", re.DOTALL)

# "<amount> <vendor> [<card_name>] [<installments>]"
# Vendor is reluctant so the optional trailing tokens are not absorbed; a bare
# integer in last position is the installment count, never the card name.
_PURCHASE_ARGS = re.compile(
    r"^(\d+(?:\.\d{1,2})?)"
    r"\s+((?:[^\W_]|\s)+?)"
    r"(?:\s+(?!-?\d+$)(\S+))?"
    r"(?:\s+(-?\d+))?$"
)


@dataclass(frozen=True)
class TransactionArgs:
    amount: int
    category: str
    subcategory: Optional[str]


@dataclass(frozen=True)
class PurchaseArgs:
    amount: Decimal
    vendor: str
    card_name: Optional[str]
    installments: int


def split_command(text: str) -> Tuple[str, str]:
    """
    Split raw message text into (command, args).

    Input is trimmed and case-folded, a leading "/" is stripped and a
    "@BotName" suffix on the command word is dropped. Both parts may be empty.
    """
    normalized = text.strip().lower().lstrip("/")
    parts = _WHITESPACE.split(normalized, maxsplit=1)
    command = parts[0].split("@", 1)[0] if parts else ""
    args = parts[1].strip() if len(parts) > 1 else ""
    return command, args


def parse_transaction_args(raw_type: str, args: str) -> TransactionArgs:
    """Parse "<amount> <category> [<subcategory>]" """
    match = _TRANSACTION_ARGS.match(args.strip())
    rest = match.group(2).strip() if match else ""
    if not rest:
        raise InvalidFormatError(f'Formato inválido. Usá: "{raw_type} 1000 sueldo".')

    amount = int(match.group(1))
    _check_amount(amount)

    parts = _WHITESPACE.split(rest, maxsplit=1)
    category = parts[0]
    subcategory = parts[1].strip() if len(parts) > 1 else None

    return TransactionArgs(
        amount=amount,
        category=category,
        subcategory=subcategory or None,
    )


def parse_purchase_args(args: str) -> PurchaseArgs:
    """Parse "<amount> <vendor> [<card_name>] [<installments>]" """
    match = _PURCHASE_ARGS.match(_WHITESPACE.sub(" ", args.strip()))
    if not match:
        raise InvalidFormatError(
            'Formato inválido. Usar: "tarjeta 1000 Supermercado [Visa] [n_cuotas]".'
        )

    amount = Decimal(match.group(1))
    _check_amount(amount)

    installments = int(match.group(4)) if match.group(4) else 1
    if installments > MAX_INSTALLMENTS:
        raise InvalidFormatError(f"Cantidad de cuotas inválida. El máximo es {MAX_INSTALLMENTS}.")

    return PurchaseArgs(
        amount=amount,
        vendor=match.group(2).strip(),
        card_name=match.group(3),
        installments=max(installments, 1),
    )


def _check_amount(amount: Union[int, Decimal]) -> None:
    if amount > MAX_AMOUNT:
        raise InvalidFormatError(f"Monto inválido. El máximo es {MAX_AMOUNT}.")
