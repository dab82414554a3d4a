"""Mapper functions to convert between domain models and SQLAlchemy models.

Enum-valued columns are stored as their string values and converted back to
domain enums here, so nothing above the database layer sees raw strings.
"""

from decimal import Decimal
from typing import Optional

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Entry as ORMEntry,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
    Account as ORMAccount,
    TransactionMapping as ORMTransactionMapping,
    Product as ORMProduct,
    ProfitTarget as ORMProfitTarget,
    RiskFinding as ORMRiskFinding,
)


def _optional_enum(enum_cls, value):
    return enum_cls(value) if value is not None else None


def _decimal(value) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def entry_to_domain(orm_entry: ORMEntry) -> domain.Entry:
    """Convert SQLAlchemy Entry model to domain Entry entity."""
    return domain.Entry(
        id=orm_entry.id,
        owner=orm_entry.owner,
        transaction_date=orm_entry.transaction_date,
        transaction_type=domain.TransactionType(orm_entry.transaction_type),
        book_category=domain.BookCategory(orm_entry.book_category),
        total_amount=Decimal(orm_entry.total_amount),
        description=orm_entry.description,
        reference_number=orm_entry.reference_number,
        party_name=orm_entry.party_name,
        party_type=_optional_enum(domain.PartyType, orm_entry.party_type),
        party_contact=orm_entry.party_contact,
        category=orm_entry.category,
        product_service_name=orm_entry.product_service_name,
        quantity=_decimal(orm_entry.quantity),
        unit_price=_decimal(orm_entry.unit_price),
        discount=Decimal(orm_entry.discount or 0),
        tax_rate=_decimal(orm_entry.tax_rate),
        amount_before_tax=_decimal(orm_entry.amount_before_tax),
        tax_amount=_decimal(orm_entry.tax_amount),
        payment_type=_optional_enum(domain.PaymentType, orm_entry.payment_type),
        payment_mode=_optional_enum(domain.PaymentMode, orm_entry.payment_mode),
        payment_reference=orm_entry.payment_reference,
        bank_name=orm_entry.bank_name,
        bank_account=orm_entry.bank_account,
        amount_paid=_decimal(orm_entry.amount_paid),
        balance_due=Decimal(orm_entry.balance_due or 0),
        due_date=orm_entry.due_date,
        employee_id=orm_entry.employee_id,
        gross_pay=_decimal(orm_entry.gross_pay),
        allowances=_decimal(orm_entry.allowances),
        deductions=_decimal(orm_entry.deductions),
        net_pay=_decimal(orm_entry.net_pay),
        debit_account=orm_entry.debit_account,
        credit_account=orm_entry.credit_account,
        ledger_category=orm_entry.ledger_category,
        notes=orm_entry.notes,
        journal_entry_id=orm_entry.journal_entry_id,
        created_at=orm_entry.created_at,
    )


def journal_line_to_domain(orm_line: ORMJournalEntryLine) -> domain.JournalLine:
    """Convert SQLAlchemy JournalEntryLine model to domain JournalLine entity."""
    return domain.JournalLine(
        id=orm_line.id,
        journal_entry_id=orm_line.journal_entry_id,
        account_type=domain.LineAccountType(orm_line.account_type),
        account_name=orm_line.account_name or "",
        entry_type=domain.EntrySide(orm_line.entry_type),
        amount=Decimal(orm_line.amount),
        notes=orm_line.notes,
        account_id=orm_line.account_id,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with lines) to domain entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        owner=orm_entry.owner,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        reference_number=orm_entry.reference_number,
        source_entry_id=orm_entry.source_entry_id,
        created_at=orm_entry.created_at,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner=orm_account.owner,
        name=orm_account.name,
        type=domain.AccountClass(orm_account.type),
        code=orm_account.code,
        subtype=_optional_enum(domain.LineAccountType, orm_account.subtype),
        parent_id=orm_account.parent_account_id,
        is_system_default=orm_account.is_system_default,
        created_at=orm_account.created_at,
    )


def transaction_mapping_to_domain(orm_mapping: ORMTransactionMapping) -> domain.TransactionMapping:
    return domain.TransactionMapping(
        id=orm_mapping.id,
        transaction_type=domain.TransactionType(orm_mapping.transaction_type),
        debit_account_name=orm_mapping.debit_account_name,
        credit_account_name=orm_mapping.credit_account_name,
        is_system_default=orm_mapping.is_system_default,
    )


def product_to_domain(orm_product: ORMProduct) -> domain.Product:
    return domain.Product(
        id=orm_product.id,
        owner=orm_product.owner,
        product_name=orm_product.product_name,
        unit_price=Decimal(orm_product.unit_price),
        bulk_price=Decimal(orm_product.bulk_price),
        created_at=orm_product.created_at,
    )


def profit_target_to_domain(orm_target: ORMProfitTarget) -> domain.ProfitTarget:
    return domain.ProfitTarget(
        id=orm_target.id,
        owner=orm_target.owner,
        target_month=orm_target.target_month,
        target_year=orm_target.target_year,
        monthly_target=Decimal(orm_target.monthly_target),
        yearly_target=Decimal(orm_target.yearly_target),
    )


def risk_finding_to_domain(orm_finding: ORMRiskFinding) -> domain.RiskFinding:
    """Convert SQLAlchemy RiskFinding model to domain RiskFinding entity."""
    return domain.RiskFinding(
        id=orm_finding.id,
        owner=orm_finding.owner,
        finding_type=orm_finding.finding_type,
        severity=domain.Severity(orm_finding.severity),
        title=orm_finding.title,
        description=orm_finding.description,
        status=domain.FindingStatus(orm_finding.status),
        recommendations=orm_finding.recommendations,
        related_entry_id=orm_finding.related_entry_id,
        metadata=orm_finding.finding_metadata,
        created_at=orm_finding.created_at,
        updated_at=orm_finding.updated_at,
        resolved_at=orm_finding.resolved_at,
    )
