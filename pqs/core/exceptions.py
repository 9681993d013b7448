from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pqs.oracle.report import MismatchReport


class ConfigurationException(Exception):
    pass


class UninformativeCaseException(Exception):
    """The test case hits a dialect behavior that cannot be predicted
    faithfully. Callers discard the case and generate a new one."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InternalInvariantError(Exception):
    """A defect in the tool itself, such as a registry lookup or type
    coercion that can never succeed. Never caught by the generation loop."""

    pass


class OracleMismatchException(Exception):
    def __init__(self, report: "MismatchReport", message: str | None = None):
        if not message:
            message = (
                f"Expected {report.predicted} but engine returned {report.actual} "
                f"for query {report.query}"
            )
        super().__init__(message)
        self.message = message
        self.report = report
