"""Reply text rendering"""

import re
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Union

from ledger_bot.domain.models import Balance, CategoryTotal, FilterCriteria, PurchaseSummary, TransactionSummary
from ledger_bot.domain.vocabulary import INVERSE_TYPE_MAP, month_name
from ledger_bot.infrastructure.database.models import CreditCardPurchase, MonthlyClosure, Transaction

Number = Union[int, Decimal]

HELP_TEXT = "\n".join([
    "Comando desconocido. Opciones:",
    "• ingreso <monto> <categoría> [<rubro>]",
    "• gasto <monto> <categoría> [<rubro>]",
    "• balance",
    "• filtro_balance [<mes>]",
    "• filtro_tx [<tipo>] [<categoría>] [<mes>] [<año>]",
    "• cierre [<mes>]",
    "• tarjeta <monto> <vendor> [<card_name>] [<n_cuotas>]",
    "• tarjeta_balance [<mes>]",
])

INTERNAL_ERROR_TEXT = "Ocurrió un error interno. Intentá de nuevo más tarde."

# Bot API sendMessage limit, counted in UTF-16 code units
MAX_MESSAGE_LENGTH = 4096

_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")


def format_amount(value: Number) -> str:
    """500 → "500", 333.3 → "333.30" """
    value = Decimal(value)
    if value == value.to_integral_value():
        return str(int(value))
    return str(value.quantize(Decimal("0.01")))


def format_money(value: Number) -> str:
    """Signed money: "$500", "-$500" """
    sign = "-" if value < 0 else ""
    return f"{sign}${format_amount(abs(value))}"


def escape_markdown(text: str) -> str:
    """Escape user text for a legacy Markdown reply: comida_rapida → comida\\_rapida"""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def message_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def fit_listing(header: str, items: List[str], footer: Optional[str] = None) -> str:
    """
    Join header, item lines and footer into one message within the Bot API limit.

    Items that do not fit are dropped from the end and replaced by a
    "… y N más" line. Header and footer are always kept.
    """
    tail = [footer] if footer else []
    full = [header] + items + tail
    if message_length("\n".join(full)) <= MAX_MESSAGE_LENGTH:
        return "\n".join(full)

    reserve = message_length(f"… y {len(items)} más") + 1
    used = message_length("\n".join([header] + tail))
    shown: List[str] = []
    for line in items:
        cost = message_length(line) + 1
        if used + cost + reserve > MAX_MESSAGE_LENGTH:
            break
        shown.append(line)
        used += cost

    shown.append(f"… y {len(items) - len(shown)} más")
    return "\n".join([header] + shown + tail)


def period_label(month: int, year: int) -> str:
    return f"{month_name(month)} {year}"


def type_label(tx_type: str) -> str:
    return INVERSE_TYPE_MAP.get(tx_type, tx_type)


def render_registered(raw_type: str, summary: TransactionSummary) -> str:
    where = f"{summary.category} / {summary.subcategory}" if summary.subcategory else summary.category
    return f"Registrado: {raw_type} de {format_money(abs(summary.amount))} en {where}"


def render_balance(balance: Balance) -> str:
    return "\n".join([
        "Balance actual:",
        f"Ingresos: {format_money(balance.income)}",
        f"Gastos: {format_money(balance.outgo)}",
        f"Saldo: {format_money(balance.balance)}",
    ])


def render_category_report(month: int, year: int, totals: Sequence[CategoryTotal]) -> str:
    """Markdown report; user-supplied category names are escaped"""
    header = f"*Resumen de {period_label(month, year)}*\n"
    if not totals:
        return f"{header}\nSin movimientos."
    items = [
        f"• *{type_label(row.type)}* - {escape_markdown(row.category)}: {format_money(abs(row.total))} ({row.count} tx)"
        for row in totals
    ]
    return fit_listing(header, items)


def render_closure(month: int, year: int, closure: MonthlyClosure) -> str:
    return "\n".join([
        f"Cierre de {period_label(month, year)}:",
        f"Ingresos: {format_money(closure.income)}",
        f"Gastos: {format_money(closure.outgo)}",
        f"Saldo: {format_money(closure.balance)}",
    ])


def render_purchase(summary: PurchaseSummary) -> str:
    lines = [f"Compra con tarjeta registrada: {format_money(summary.amount)} en {summary.vendor}"]
    count = len(summary.installments)
    if count > 1:
        last = summary.installments[-1].amount
        first = summary.installments[0].amount
        detail = f"{count} cuotas de {format_money(first)}"
        if last != first:
            detail += f" (última {format_money(last)})"
        lines.append(f"{detail}, primer ciclo {summary.first_cycle}")
    else:
        lines.append(f"Ciclo de facturación: {summary.first_cycle}")
    return "\n".join(lines)


def render_card_balance(
    month: int,
    year: int,
    total: Decimal,
    purchases: Iterable[CreditCardPurchase],
) -> str:
    header = f"Balance tarjeta para {period_label(month, year)}: {format_money(total)}"
    items = []
    for purchase in purchases:
        card = f" ({purchase.card_name})" if purchase.card_name else ""
        items.append(f"• {purchase.vendor}{card}: {format_money(purchase.amount)}")
    return fit_listing(header, items)


def render_filtered_transactions(criteria: FilterCriteria, transactions: List[Transaction]) -> str:
    filters = ""
    if criteria.type:
        filters += f" de {type_label(criteria.type)}"
    if criteria.category:
        filters += f" en {criteria.category}"

    if criteria.month_provided or criteria.year_provided:
        period = period_label(criteria.month, criteria.year)
    else:
        period = "este mes"

    if not transactions:
        return f"No hay transacciones{filters} para {period}."

    items = []
    running = 0
    for tx in transactions:
        running += tx.amount
        where = f"{tx.category} / {tx.subcategory}" if tx.subcategory else tx.category
        items.append(
            f"• {tx.created_at:%d/%m} {type_label(tx.type)} {where}: "
            f"{format_money(tx.amount)} (acumulado {format_money(running)})"
        )
    return fit_listing(f"Transacciones{filters} ({period}):", items, f"Total: {format_money(running)}")
