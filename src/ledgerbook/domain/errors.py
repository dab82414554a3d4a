"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class UnbalancedEntryError(ValidationError):
    """Journal lines whose debits and credits do not balance."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist for this owner."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidTransitionError(DomainError):
    """Status change not allowed from the current state."""


TOTAL_NOT_POSITIVE = "Total amount must be greater than 0"
UNBALANCED_ENTRY = "Debits and credits must balance"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing flat entry."""
    return f"Entry {entry_id} not found"


def journal_entry_not_found(journal_entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {journal_entry_id} not found"


def finding_not_found(finding_id: int) -> str:
    """Return message for missing risk finding."""
    return f"Risk finding {finding_id} not found"


def product_not_found(product_id: int) -> str:
    return f"Product {product_id} not found"


def account_name_not_found(name: str) -> str:
    return f"Account '{name}' not found"


def unknown_choice(kind: str, value: object, choices: list[str]) -> str:
    """Return message for a value outside a closed set."""
    return f"Invalid {kind} '{value}'. Expected one of: {', '.join(choices)}"


def unbalanced_entry(total_debit, total_credit) -> str:
    """Return message for journal lines that do not balance."""
    return (
        f"{UNBALANCED_ENTRY} (debits {total_debit:.2f}, credits {total_credit:.2f})"
    )
