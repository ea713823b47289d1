"""Exception types shared across the analysis engine, repositories, and API."""


class ValidationError(ValueError):
    """Raised when user input is rejected before any repository call is made."""


class RepositoryError(RuntimeError):
    """Raised when the report repository cannot be reached or fails a query."""


class ReportNotFoundError(KeyError):
    """Raised when a report identifier does not resolve to a stored report."""

    def __init__(self, report_id: str) -> None:
        super().__init__(report_id)
        self.report_id = report_id

    def __str__(self) -> str:
        return f"Report not found: {self.report_id}"


__all__ = ["ValidationError", "RepositoryError", "ReportNotFoundError"]
