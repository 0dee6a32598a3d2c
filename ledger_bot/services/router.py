"""Command routing: free text in, reply text out"""

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from ledger_bot.domain.exceptions import DomainException, InvalidMonthError, PersistenceError
from ledger_bot.domain.filters import FilterValidator
from ledger_bot.domain.grammar import split_command
from ledger_bot.domain.models import CallerContext
from ledger_bot.domain.vocabulary import month_number
from ledger_bot.infrastructure.observability.logging import log_command
from ledger_bot.infrastructure.observability.metrics import internal_error_counter, record_command
from ledger_bot.services import replies
from ledger_bot.services.closure import ClosureService
from ledger_bot.services.credit_card import CreditCardScheduler
from ledger_bot.services.ledger import TransactionLedger
from ledger_bot.utils.date_utils import Clock, now_local

Handler = Callable[[str, str, CallerContext], str]

# Replies sent with Bot API Markdown formatting
MARKDOWN_COMMANDS = frozenset({"filtro_balance"})


class CommandRouter:
    """
    Maps a command word to one domain service call and renders the reply.

    dispatch never raises: domain errors become their message, anything else
    becomes a generic internal-error reply.
    """

    def __init__(
        self,
        ledger: TransactionLedger,
        closures: ClosureService,
        cards: CreditCardScheduler,
        filters: FilterValidator,
        clock: Optional[Clock] = None,
    ):
        self.ledger = ledger
        self.closures = closures
        self.cards = cards
        self.filters = filters
        self.clock = clock or now_local
        self._handlers: Dict[str, Handler] = {
            "ingreso": self._handle_transaction,
            "gasto": self._handle_transaction,
            "balance": self._handle_balance,
            "filtro_balance": self._handle_filtered_balance,
            "filtro_tx": self._handle_filtered_transactions,
            "cierre": self._handle_closure,
            "tarjeta": self._handle_credit_card,
            "tarjeta_balance": self._handle_credit_card_balance,
        }

    @classmethod
    def for_session(cls, db: Session, clock: Optional[Clock] = None) -> "CommandRouter":
        """Wire every service to one session"""
        return cls(
            ledger=TransactionLedger(db, clock=clock),
            closures=ClosureService(db, clock=clock),
            cards=CreditCardScheduler(db, clock=clock),
            filters=FilterValidator(clock=clock),
            clock=clock,
        )

    @staticmethod
    def route(text: str) -> Tuple[str, str]:
        return split_command(text)

    @staticmethod
    def formatting_hint(command: str) -> Optional[str]:
        return "Markdown" if command in MARKDOWN_COMMANDS else None

    def handle(self, text: str, context: CallerContext) -> str:
        command, args = self.route(text)
        return self.dispatch(command, args, context)

    def dispatch(self, command: str, args: str, context: CallerContext) -> str:
        start_time = time.time()
        handler = self._handlers.get(command)
        outcome = "ok"

        try:
            if handler is None:
                outcome = "rejected"
                return replies.HELP_TEXT
            return handler(command, args, context)

        except PersistenceError as e:
            outcome = "error"
            return e.message

        except DomainException as e:
            outcome = "rejected"
            return e.message

        except Exception as e:
            outcome = "error"
            internal_error_counter.labels(operation=command or "unknown").inc()
            logging.error(f"Unexpected error handling {command!r}: {e}", exc_info=True, extra={"chat_id": context.chat_id})
            return replies.INTERNAL_ERROR_TEXT

        finally:
            duration_ms = (time.time() - start_time) * 1000
            record_command(command, outcome)
            log_command(context.chat_id, command, outcome, duration_ms)

    def _resolve_month(self, command: str, args: str) -> Tuple[int, int]:
        """Month from a name/number argument or the current month; year is always current"""
        now = self.clock()
        token = args.strip()
        if not token:
            return now.month, now.year

        month = month_number(token)
        if month is None:
            raise InvalidMonthError(
                f'Mes inválido. Usá: "{command} mayo" o simplemente "{command}" para el mes actual.'
            )
        return month, now.year

    def _handle_transaction(self, command: str, args: str, context: CallerContext) -> str:
        summary = self.ledger.register(command, args, context.chat_id, context.display_name)
        return replies.render_registered(command, summary)

    def _handle_balance(self, command: str, args: str, context: CallerContext) -> str:
        return replies.render_balance(self.ledger.get_balance())

    def _handle_filtered_balance(self, command: str, args: str, context: CallerContext) -> str:
        month, year = self._resolve_month(command, args)
        return self.ledger.get_balance_per_category(month, year)

    def _handle_filtered_transactions(self, command: str, args: str, context: CallerContext) -> str:
        criteria = self.filters.parse(args)
        transactions = self.ledger.get_filtered_transactions(
            criteria.type, criteria.category, criteria.month, criteria.year
        )
        return replies.render_filtered_transactions(criteria, transactions)

    def _handle_closure(self, command: str, args: str, context: CallerContext) -> str:
        month, year = self._resolve_month(command, args)
        closure = self.closures.close_month(month, year)
        return replies.render_closure(month, year, closure)

    def _handle_credit_card(self, command: str, args: str, context: CallerContext) -> str:
        summary = self.cards.register_purchase(args, context.chat_id, context.display_name)
        return replies.render_purchase(summary)

    def _handle_credit_card_balance(self, command: str, args: str, context: CallerContext) -> str:
        month, year = self._resolve_month(command, args)
        total = self.cards.get_monthly_balance(month, year)
        purchases = self.cards.list_monthly_purchases(month, year)
        return replies.render_card_balance(month, year, total, purchases)
