"""Chart of accounts domain service."""

from typing import Optional, Any, Callable, Iterable

from ledgerbook.database.base import Database
from ledgerbook.domain.books import (
    DEFAULT_CHART,
    DEFAULT_TRANSACTION_MAPPINGS,
    LINE_ACCOUNT_CLASS,
)
from ledgerbook.domain.entities import (
    Account as AccountEntity,
    AccountClass,
    JournalLine,
    LineAccountType,
    TransactionMapping,
)
from ledgerbook.domain.errors import ConflictError, NotFoundError, ValidationError, unknown_choice
from ledgerbook.logging_config import get_logger

logger = get_logger(__name__)

# Checked in order; the first keyword found in the name wins
ACCOUNT_NAME_KEYWORDS: list[tuple[AccountClass, tuple[str, ...]]] = [
    (AccountClass.ASSET, ("cash", "bank", "inventory", "receivable", "asset")),
    (AccountClass.LIABILITY, ("payable", "liability", "loan")),
    (AccountClass.EQUITY, ("capital", "equity", "owner")),
    (AccountClass.INCOME, ("revenue", "sales", "income")),
    (AccountClass.EXPENSE, ("expense", "cost", "purchase")),
]

Classifier = Callable[[JournalLine], Optional[AccountClass]]


def infer_account_class(name: str) -> Optional[AccountClass]:
    """Guess an account class from keywords in its name.

    Only meant for one-off data migration of legacy accounts; statements
    never classify by name.
    """
    lowered = (name or "").lower()
    for account_class, keywords in ACCOUNT_NAME_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return account_class
    return None


def build_classifier(accounts: Iterable[AccountEntity]) -> Classifier:
    """Build a function mapping a journal line to its account class.

    Resolution order: the linked account_id, then the fixed class of the
    line's account_type, then (for "other" lines) an exact, case-insensitive
    lookup of the account name in the chart. Lines that resolve to nothing
    are unclassified (None).
    """
    by_id: dict[int, AccountEntity] = {}
    by_name: dict[str, AccountEntity] = {}
    for account in accounts:
        by_id[account.id] = account
        key = account.name.strip().lower()
        # Owner accounts shadow system defaults of the same name
        if key not in by_name or by_name[key].owner is None:
            by_name[key] = account

    def classify(line: JournalLine) -> Optional[AccountClass]:
        if line.account_id is not None and line.account_id in by_id:
            return by_id[line.account_id].type
        if line.account_type in LINE_ACCOUNT_CLASS:
            return LINE_ACCOUNT_CLASS[line.account_type]
        account = by_name.get((line.account_name or "").strip().lower())
        return account.type if account is not None else None

    return classify


def _coerce_account_class(value) -> AccountClass:
    if isinstance(value, AccountClass):
        return value
    try:
        return AccountClass(str(value).strip().lower())
    except ValueError:
        raise ValidationError(unknown_choice("account type", value, [c.value for c in AccountClass]))


def _coerce_subtype(value) -> Optional[LineAccountType]:
    if value is None or value == "":
        return None
    if isinstance(value, LineAccountType):
        return value
    try:
        return LineAccountType(str(value).strip().lower())
    except ValueError:
        raise ValidationError(unknown_choice("subtype", value, [t.value for t in LineAccountType]))


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database, owner: str):
        """Initialize account service.

        Args:
            db: Database instance
            owner: Identifier of the user whose chart is being managed
        """
        self.db = db
        self.owner = owner

    def initialize_defaults(self) -> int:
        """Seed the shared default chart and transaction mappings.

        Safe to run repeatedly; existing defaults are left untouched.

        Returns:
            Number of accounts and mappings created
        """
        system_accounts = [acc for acc in self.db.list_accounts(self.owner) if acc.owner is None]
        existing = {acc.name for acc in system_accounts}
        ids_by_code: dict[str, int] = {acc.code: acc.id for acc in system_accounts if acc.code}

        created = 0
        for code, name, account_class, subtype, parent_code in DEFAULT_CHART:
            if name in existing:
                continue
            ids_by_code[code] = self.db.create_account(
                owner=None,
                name=name,
                account_type=account_class,
                code=code,
                subtype=subtype,
                parent_id=ids_by_code.get(parent_code) if parent_code else None,
                is_system_default=True,
            )
            created += 1

        for transaction_type, (debit_name, credit_name) in DEFAULT_TRANSACTION_MAPPINGS.items():
            if self.db.get_transaction_mapping(transaction_type) is not None:
                continue
            self.db.create_transaction_mapping(transaction_type, debit_name, credit_name, is_system_default=True)
            created += 1

        logger.info("default_chart_initialized", created=created)
        return created

    def create_account(
        self,
        name: str,
        account_type: AccountClass | str,
        code: Optional[str] = None,
        subtype: Optional[LineAccountType | str] = None,
        parent_code: Optional[str] = None,
    ) -> int:
        """Create an account owned by the current user.

        Args:
            name: Account name (unique per owner)
            account_type: Account class (asset, liability, equity, income, expense)
            code: Optional account code
            subtype: Optional journal line account type the account maps to
            parent_code: Optional code of the parent account

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is blank or a choice is invalid
            ConflictError: If the owner already has an account with this name
            NotFoundError: If the parent code doesn't exist
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        account_class = _coerce_account_class(account_type)
        line_subtype = _coerce_subtype(subtype)

        existing = self.db.get_account_by_name(self.owner, name)
        if existing is not None and existing.owner == self.owner:
            raise ConflictError(f"Account '{name}' already exists")

        parent_id = None
        if parent_code:
            parent = next((acc for acc in self.db.list_accounts(self.owner) if acc.code == parent_code), None)
            if parent is None:
                raise NotFoundError(f"Parent account with code '{parent_code}' not found")
            parent_id = parent.id

        account_id = self.db.create_account(
            owner=self.owner,
            name=name,
            account_type=account_class,
            code=code,
            subtype=line_subtype,
            parent_id=parent_id,
        )
        logger.info("account_created", account_id=account_id, name=name, account_type=account_class.value)
        return account_id

    def list_accounts(self) -> list[AccountEntity]:
        """List the owner's accounts and the shared defaults."""
        return self.db.list_accounts(self.owner)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not visible to the owner
        """
        return self.db.get_account(self.owner, account_id)

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        return self.db.get_account_by_name(self.owner, name)

    def set_account_type(self, name: str, account_type: AccountClass | str) -> AccountEntity:
        """Change the class of one of the owner's accounts.

        Shared default accounts cannot be retyped.

        Args:
            name: Account name
            account_type: New account class

        Returns:
            The updated account

        Raises:
            ValidationError: If the class is invalid or the account is a shared default
            NotFoundError: If no account has this name
        """
        account_class = _coerce_account_class(account_type)
        account = self.db.get_account_by_name(self.owner, name)
        if account is None:
            raise NotFoundError(f"Account '{name}' not found")
        if account.owner is None:
            raise ValidationError(f"Account '{account.name}' is a shared default and cannot be retyped")

        self.db.update_account_type(account.id, account_class)
        logger.info(
            "account_type_changed",
            account_id=account.id,
            from_type=account.type.value,
            to_type=account_class.value,
        )
        return self.get_account(account.id)

    def get_account_tree(self) -> list[dict[str, Any]]:
        """Get the chart of accounts as a tree.

        Returns:
            List of root accounts, each a dict with nested "children"
        """
        accounts = self.list_accounts()

        def build_tree(parent_id: Optional[int] = None) -> list[dict[str, Any]]:
            result = []
            for acc in accounts:
                if acc.parent_id == parent_id:
                    result.append(
                        {
                            "id": acc.id,
                            "code": acc.code,
                            "name": acc.name,
                            "type": acc.type,
                            "parent_id": acc.parent_id,
                            "children": build_tree(acc.id),
                        }
                    )
            return result

        return build_tree()

    def list_transaction_mappings(self) -> list[TransactionMapping]:
        return self.db.list_transaction_mappings()

    def classifier(self) -> Classifier:
        """Return a line classifier over the current chart of accounts."""
        return build_classifier(self.list_accounts())

    def resolve_account_class(self, line: JournalLine) -> Optional[AccountClass]:
        """Resolve the account class of a single journal line."""
        return self.classifier()(line)
