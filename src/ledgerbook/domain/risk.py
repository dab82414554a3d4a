"""Risk finding domain service."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Iterable, Mapping, Sequence
from datetime import datetime, UTC
from decimal import Decimal

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    FinancialSummary,
    FindingStatus,
    JournalEntry,
    RiskFinding as RiskFindingEntity,
    Severity,
)
from ledgerbook.domain.errors import (
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    finding_not_found,
    unknown_choice,
)
from ledgerbook.domain.statements import StatementService, financial_summary
from ledgerbook.logging_config import get_logger

logger = get_logger(__name__)

LARGE_TRANSACTION_THRESHOLD = Decimal("10000")
DATA_INTEGRITY = "data_integrity"
REQUIRED_FINDING_FIELDS = ("finding_type", "title", "description")

# Allowed status changes; resolved and dismissed are terminal
TRANSITIONS: dict[FindingStatus, frozenset[FindingStatus]] = {
    FindingStatus.OPEN: frozenset({FindingStatus.RESOLVED, FindingStatus.DISMISSED}),
    FindingStatus.RESOLVED: frozenset(),
    FindingStatus.DISMISSED: frozenset(),
}


class RiskAnalyzer(ABC):
    """External analyzer that turns a financial summary into findings."""

    @abstractmethod
    def analyze(self, summary: FinancialSummary) -> list[dict[str, Any]]:
        """Return findings as dicts.

        Each dict carries finding_type, severity, title, description and
        optionally recommendations.
        """
        pass


def rule_findings(journal_entries: Iterable[JournalEntry]) -> list[dict[str, Any]]:
    """Run the built-in checks over the journal.

    Flags a repeated (date, description) pair as a possible duplicate, any
    line above 10,000 as a large transaction and any entry without a
    reference number as missing documentation.
    """
    findings: list[dict[str, Any]] = []
    seen: set[tuple[Any, str]] = set()

    for entry in journal_entries:
        key = (entry.entry_date, entry.description)
        if key in seen:
            findings.append(
                {
                    "finding_type": "duplicate_entry",
                    "severity": Severity.MEDIUM,
                    "title": "Potential Duplicate Entry Detected",
                    "description": (
                        f'Entry on {entry.entry_date} with description "{entry.description}" '
                        "appears to be duplicated."
                    ),
                    "recommendations": "Review these entries and remove duplicates if necessary.",
                    "related_entry_id": entry.id,
                }
            )
        seen.add(key)

        for line in entry.lines:
            if line.amount > LARGE_TRANSACTION_THRESHOLD:
                findings.append(
                    {
                        "finding_type": "large_transaction",
                        "severity": Severity.HIGH,
                        "title": "Large Transaction Detected",
                        "description": (
                            f'Transaction of ${line.amount:,.2f} in account "{line.account_name}"'
                        ),
                        "recommendations": (
                            "Verify that this large transaction is legitimate and properly documented."
                        ),
                        "related_entry_id": entry.id,
                    }
                )

        if not entry.reference_number:
            findings.append(
                {
                    "finding_type": "missing_documentation",
                    "severity": Severity.LOW,
                    "title": "Missing Reference Number",
                    "description": f"Entry on {entry.entry_date} is missing a reference number.",
                    "recommendations": "Add a reference number for better tracking and audit trail.",
                    "related_entry_id": entry.id,
                }
            )

    return findings


def validate_finding(finding: Mapping[str, Any]) -> dict[str, Any]:
    """Check an analyzer-supplied finding and normalise its severity.

    Raises:
        ValidationError: If the finding is not a mapping, a required field is
            missing or the severity is unknown
    """
    if not isinstance(finding, Mapping):
        raise ValidationError(f"Finding must be a mapping, got {type(finding).__name__}")
    for field_name in REQUIRED_FINDING_FIELDS:
        if not finding.get(field_name):
            raise ValidationError(f"Finding is missing '{field_name}'")
    try:
        severity = Severity(finding.get("severity"))
    except ValueError:
        raise ValidationError(
            unknown_choice("severity", finding.get("severity"), [s.value for s in Severity])
        )
    return {
        "finding_type": str(finding["finding_type"]),
        "severity": severity,
        "title": str(finding["title"]),
        "description": str(finding["description"]),
        "recommendations": finding.get("recommendations"),
        "related_entry_id": finding.get("related_entry_id"),
        "metadata": finding.get("metadata"),
    }


class RiskService:
    """Service for raising and triaging risk findings."""

    def __init__(self, db: Database, owner: str):
        """Initialize risk service.

        Args:
            db: Database instance
            owner: Identifier of the user whose books are analysed
        """
        self.db = db
        self.owner = owner

    def analyze(self, analyzer: Optional[RiskAnalyzer] = None) -> list[int]:
        """Run rule checks (and the analyzer, if given) and store the findings.

        Analyzer findings that fail validation are logged and skipped.

        Returns:
            IDs of the created findings
        """
        journal_entries = self.db.list_journal_entries(self.owner)
        findings = rule_findings(journal_entries)

        if analyzer is not None:
            summary = financial_summary(journal_entries)
            for raw in analyzer.analyze(summary):
                try:
                    findings.append(validate_finding(raw))
                except ValidationError as e:
                    logger.warning("analyzer_finding_skipped", reason=str(e))

        if not findings:
            logger.info("risk_analysis_completed", findings=0)
            return []

        finding_ids = self.db.create_risk_findings(
            self.owner,
            [{**finding, "status": FindingStatus.OPEN} for finding in findings],
        )
        logger.info("risk_analysis_completed", findings=len(finding_ids))
        return finding_ids

    def check_integrity(self) -> Optional[int]:
        """Record a critical finding if the balance sheet does not balance.

        Lines that cannot be classified into an account class are reported in
        the same finding.

        Returns:
            ID of the created finding, or None if the books are consistent
        """
        sheet, trial = StatementService(self.db, self.owner).balance_sheet()
        if sheet.is_balanced and not trial.unclassified:
            return None

        problems = []
        if not sheet.is_balanced:
            problems.append(
                f"Total assets {sheet.total_assets:,.2f} do not equal liabilities plus equity "
                f"{sheet.total_liabilities + sheet.total_equity:,.2f} "
                f"(difference {sheet.difference:,.2f})."
            )
        if trial.unclassified:
            names = sorted({line.account_name or line.account_type.value for line in trial.unclassified})
            problems.append(f"{len(trial.unclassified)} line(s) have no account class: {', '.join(names)}.")

        finding_id = self.db.create_risk_findings(
            self.owner,
            [
                {
                    "finding_type": DATA_INTEGRITY,
                    "severity": Severity.CRITICAL,
                    "title": "Balance Sheet Integrity Check Failed",
                    "description": " ".join(problems),
                    "recommendations": (
                        "Review journal lines for missing or misclassified accounts and "
                        "make sure every account has a type in the chart of accounts."
                    ),
                    "status": FindingStatus.OPEN,
                    "metadata": {
                        "difference": str(sheet.difference),
                        "unclassified_line_ids": [line.id for line in trial.unclassified],
                    },
                }
            ],
        )[0]
        logger.warning("integrity_check_failed", finding_id=finding_id, difference=str(sheet.difference))
        return finding_id

    def _transition(self, finding_id: int, status: FindingStatus) -> None:
        finding = self.db.get_risk_finding(self.owner, finding_id)
        if finding is None:
            raise NotFoundError(finding_not_found(finding_id))
        if status not in TRANSITIONS[finding.status]:
            raise InvalidTransitionError(
                f"Cannot change finding {finding_id} from {finding.status.value} to {status.value}"
            )

        resolved_at = datetime.now(UTC) if status == FindingStatus.RESOLVED else None
        self.db.update_risk_finding_status(self.owner, finding_id, status, resolved_at=resolved_at)
        logger.info(
            "finding_status_changed",
            finding_id=finding_id,
            from_status=finding.status.value,
            to_status=status.value,
        )

    def resolve(self, finding_id: int) -> None:
        """Mark an open finding resolved.

        Raises:
            NotFoundError: If the finding doesn't exist
            InvalidTransitionError: If the finding is not open
        """
        self._transition(finding_id, FindingStatus.RESOLVED)

    def dismiss(self, finding_id: int) -> None:
        """Dismiss an open finding.

        Raises:
            NotFoundError: If the finding doesn't exist
            InvalidTransitionError: If the finding is not open
        """
        self._transition(finding_id, FindingStatus.DISMISSED)

    def get_finding(self, finding_id: int) -> Optional[RiskFindingEntity]:
        return self.db.get_risk_finding(self.owner, finding_id)

    def list_findings(
        self,
        status: Optional[FindingStatus | str] = None,
        severities: Optional[Sequence[Severity | str]] = None,
    ) -> list[RiskFindingEntity]:
        """List findings, newest first, optionally filtered by status and severity."""
        try:
            status_filter = FindingStatus(status) if status else None
            severity_filter = [Severity(s) for s in severities] if severities else None
        except ValueError as e:
            raise ValidationError(str(e))
        return self.db.list_risk_findings(self.owner, status=status_filter, severities=severity_filter)
