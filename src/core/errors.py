"""Error types for the audit engine."""


class AuditError(Exception):
    """Base exception for audit errors."""

    pass


class NavigationError(AuditError):
    """The target page could not be loaded. Fatal for the whole run."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Navigation to '{url}' failed: {message}")


class AnalyzerError(AuditError):
    """Raised by an analyzer when the page is not in the state it expects."""

    pass


class AnalyzerContractError(AuditError):
    """An analyzer broke the slot contract. Always a programming error."""

    pass


class DuplicateSlotError(AnalyzerContractError):
    def __init__(self, slot_name: str):
        self.slot_name = slot_name
        super().__init__(f"Slot '{slot_name}' was already written in this run")


class UndeclaredSlotError(AnalyzerContractError):
    def __init__(self, analyzer_name: str, slot_name: str, access: str):
        self.analyzer_name = analyzer_name
        self.slot_name = slot_name
        self.access = access
        super().__init__(
            f"Analyzer '{analyzer_name}' tried to {access} undeclared slot '{slot_name}'"
        )


class AnalyzerGraphError(AnalyzerContractError):
    """Invalid analyzer registration: duplicate names, shared writes, unknown reads or cycles."""

    pass


class FetchError(AuditError):
    """Out-of-band HTTP request failed."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Fetching '{url}': {message}")


class FetchTimeout(FetchError):
    pass


class PersistenceError(AuditError):
    """The report was produced but could not be written."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Could not write report to '{path}': {message}")
