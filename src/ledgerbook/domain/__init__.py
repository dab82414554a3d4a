"""Domain layer for ledgerbook.

Services are resolved lazily so that the database layer can import
``ledgerbook.domain.entities`` without pulling the services in first.
"""

_SERVICES = {
    "EntryService": "ledgerbook.domain.entry",
    "JournalService": "ledgerbook.domain.journal",
    "AccountService": "ledgerbook.domain.accounts",
    "StatementService": "ledgerbook.domain.statements",
    "RiskService": "ledgerbook.domain.risk",
    "ProductService": "ledgerbook.domain.product",
    "ProfitTargetService": "ledgerbook.domain.target",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
