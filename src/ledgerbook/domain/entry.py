"""Flat entry domain service."""

from typing import Optional, Any
from datetime import date
from decimal import Decimal

from ledgerbook.database.base import Database
from ledgerbook.domain.books import coerce_transaction_type
from ledgerbook.domain.entities import (
    BookCategory,
    Entry as EntryEntity,
    EntryAmounts,
    PartyType,
    PaymentMode,
    PaymentType,
    TransactionType,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    TOTAL_NOT_POSITIVE,
    entry_not_found,
    unknown_choice,
)
from ledgerbook.logging_config import get_logger
from ledgerbook.utils.amount_parser import ZERO, money, to_decimal

logger = get_logger(__name__)


def compute_entry_amounts(
    transaction_type: TransactionType,
    quantity: Optional[Decimal] = None,
    unit_price: Optional[Decimal] = None,
    discount: Optional[Decimal] = None,
    tax_rate: Optional[Decimal] = None,
    amount_paid: Optional[Decimal] = None,
    gross_pay: Optional[Decimal] = None,
    allowances: Optional[Decimal] = None,
    deductions: Optional[Decimal] = None,
) -> EntryAmounts:
    """Compute the monetary fields of a flat entry.

    Payroll entries total their net pay. Every other type totals
    quantity x unit price less discount, plus tax. Missing inputs count as 0
    and results are rounded to cents.

    Args:
        transaction_type: Type of the entry
        quantity: Units sold or bought
        unit_price: Price per unit
        discount: Discount taken off the line amount
        tax_rate: Tax rate in percent
        amount_paid: Amount settled up front
        gross_pay: Payroll gross pay
        allowances: Payroll allowances
        deductions: Payroll deductions

    Returns:
        EntryAmounts with total, pre-tax amount, tax, balance due and net pay
    """
    if coerce_transaction_type(transaction_type) == TransactionType.PAYROLL:
        net_pay = money(to_decimal(gross_pay) + to_decimal(allowances) - to_decimal(deductions))
        return EntryAmounts(total_amount=net_pay, net_pay=net_pay)

    amount_before_tax = money(to_decimal(quantity) * to_decimal(unit_price) - to_decimal(discount))
    tax_amount = money(amount_before_tax * to_decimal(tax_rate) / 100)
    total_amount = money(amount_before_tax + tax_amount)
    return EntryAmounts(
        total_amount=total_amount,
        amount_before_tax=amount_before_tax,
        tax_amount=tax_amount,
        balance_due=money(total_amount - to_decimal(amount_paid)),
    )


def _coerce_choice(enum_cls, kind: str, value):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise ValidationError(unknown_choice(kind, value, [c.value for c in enum_cls]))


class EntryService:
    """Service for recording flat transaction entries."""

    def __init__(self, db: Database, owner: str):
        """Initialize entry service.

        Args:
            db: Database instance
            owner: Identifier of the user whose books are being kept
        """
        self.db = db
        self.owner = owner

    def create_entry(
        self,
        transaction_type: TransactionType | str,
        transaction_date: Optional[date] = None,
        description: Optional[str] = None,
        reference_number: Optional[str] = None,
        party_name: Optional[str] = None,
        party_type: Optional[PartyType | str] = None,
        party_contact: Optional[str] = None,
        category: Optional[str] = None,
        product_service_name: Optional[str] = None,
        quantity: Optional[Decimal] = None,
        unit_price: Optional[Decimal] = None,
        discount: Optional[Decimal] = None,
        tax_rate: Optional[Decimal] = None,
        payment_type: Optional[PaymentType | str] = None,
        payment_mode: Optional[PaymentMode | str] = None,
        payment_reference: Optional[str] = None,
        bank_name: Optional[str] = None,
        bank_account: Optional[str] = None,
        amount_paid: Optional[Decimal] = None,
        due_date: Optional[date] = None,
        employee_id: Optional[str] = None,
        gross_pay: Optional[Decimal] = None,
        allowances: Optional[Decimal] = None,
        deductions: Optional[Decimal] = None,
        debit_account: Optional[str] = None,
        credit_account: Optional[str] = None,
        ledger_category: Optional[str] = None,
        notes: Optional[str] = None,
        post: bool = False,
    ) -> int:
        """Validate, compute and persist one flat entry.

        Args:
            transaction_type: Required transaction type
            transaction_date: Date of the transaction (defaults to today)
            post: Also post the entry into the journal, in the same
                transaction as the insert

        Returns:
            Entry ID

        Raises:
            ValidationError: If the transaction type or a choice field is
                invalid, if posting is requested for a non-positive total, or
                if posting fails (the entry is not stored then)
        """
        txn_type = coerce_transaction_type(transaction_type)
        party_type = _coerce_choice(PartyType, "party type", party_type)
        payment_type = _coerce_choice(PaymentType, "payment type", payment_type)
        payment_mode = _coerce_choice(PaymentMode, "payment mode", payment_mode)

        amounts = compute_entry_amounts(
            txn_type,
            quantity=quantity,
            unit_price=unit_price,
            discount=discount,
            tax_rate=tax_rate,
            amount_paid=amount_paid,
            gross_pay=gross_pay,
            allowances=allowances,
            deductions=deductions,
        )
        if post and amounts.total_amount <= ZERO:
            raise ValidationError(TOTAL_NOT_POSITIVE)

        is_payroll = txn_type == TransactionType.PAYROLL
        fields: dict[str, Any] = {
            "transaction_date": transaction_date or date.today(),
            "transaction_type": txn_type,
            "book_category": self.db.assign_book_category(txn_type),
            "description": description,
            "reference_number": reference_number,
            "party_name": party_name,
            "party_type": party_type,
            "party_contact": party_contact,
            "category": category,
            "product_service_name": product_service_name,
            "quantity": quantity,
            "unit_price": unit_price,
            "discount": money(discount),
            "tax_rate": tax_rate,
            "amount_before_tax": None if is_payroll else amounts.amount_before_tax,
            "tax_amount": None if is_payroll else amounts.tax_amount,
            "total_amount": amounts.total_amount,
            "payment_type": payment_type,
            "payment_mode": payment_mode,
            "payment_reference": payment_reference,
            "bank_name": bank_name,
            "bank_account": bank_account,
            "amount_paid": amount_paid,
            "balance_due": amounts.balance_due,
            "due_date": due_date,
            "employee_id": employee_id,
            "gross_pay": gross_pay,
            "allowances": allowances,
            "deductions": deductions,
            "net_pay": amounts.net_pay,
            "debit_account": debit_account,
            "credit_account": credit_account,
            "ledger_category": ledger_category,
            "notes": notes,
        }
        if post:
            result = self.db.create_and_post_entry(self.owner, fields)
            if not result.success:
                logger.warning("entry_post_failed", transaction_type=txn_type.value, error=result.error)
                raise ValidationError(result.error)
            entry_id = result.entry_id
        else:
            entry_id = self.db.create_entry(self.owner, fields)
        logger.info(
            "entry_created",
            entry_id=entry_id,
            transaction_type=txn_type.value,
            total_amount=str(amounts.total_amount),
            posted=post,
        )
        return entry_id

    def post_entry(self, entry_id: int) -> int:
        """Post a flat entry into the journal.

        Returns:
            Journal entry ID

        Raises:
            NotFoundError: If the entry doesn't exist
            ValidationError: If the entry cannot be posted
        """
        if self.db.get_entry(self.owner, entry_id) is None:
            raise NotFoundError(entry_not_found(entry_id))

        result = self.db.post_transaction(self.owner, entry_id)
        if not result.success:
            logger.warning("entry_post_failed", entry_id=entry_id, error=result.error)
            raise ValidationError(result.error)
        return result.journal_entry_id

    def get_entry(self, entry_id: int) -> Optional[EntryEntity]:
        """Get entry by ID.

        Returns:
            Entry entity or None if not found
        """
        return self.db.get_entry(self.owner, entry_id)

    def list_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        book_category: Optional[BookCategory | str] = None,
        transaction_type: Optional[TransactionType | str] = None,
    ) -> list[EntryEntity]:
        """List entries with filters, newest first."""
        book = _coerce_choice(BookCategory, "book category", book_category)
        txn_type = coerce_transaction_type(transaction_type) if transaction_type else None
        return self.db.list_entries(
            self.owner,
            start_date=start_date,
            end_date=end_date,
            book_category=book,
            transaction_type=txn_type,
        )
