"""Quality model errors: factor graph integrity and missing evaluation inputs."""

from typing import Optional

from .base import CnaQualityError


class QualityModelError(CnaQualityError):
    """Base class for quality model (factor graph) errors."""

    pass


class UnknownFactorError(QualityModelError):
    """Raised when an impact references a factor id that does not exist."""

    def __init__(self, factor_id: str, referenced_by: Optional[str] = None):
        details = {"factor_id": factor_id}
        if referenced_by:
            details["referenced_by"] = referenced_by

        super().__init__(f"Unknown factor: {factor_id}", details=details)
        self.factor_id = factor_id
        self.referenced_by = referenced_by


class DuplicateFactorError(QualityModelError):
    """Raised when two factors share one id."""

    def __init__(self, factor_id: str):
        super().__init__(f"Duplicate factor id: {factor_id}", details={"factor_id": factor_id})
        self.factor_id = factor_id


class MissingMeasureError(QualityModelError):
    """Raised by evaluation rules when a required measure is absent or not applicable.

    The evaluation engine catches this and records the factor as unknown.
    """

    def __init__(self, measure: str, reason: str = "not calculated"):
        super().__init__(
            f"Measure unavailable: {measure}",
            details={"measure": measure, "reason": reason},
        )
        self.measure = measure
        self.reason = reason
