# natalchart/core/errors.py
from __future__ import annotations

__all__ = ["ChartError", "DegenerateGeometryError", "ComputationError"]


class ChartError(ValueError):
    """Base for core failures. `code` is a stable machine-readable slug."""
    code: str = "chart_error"

    def __init__(self, message: str, code: str | None = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(f"{self.code}: {message}")


class DegenerateGeometryError(ChartError):
    """Observer geometry where house math is undefined (e.g. at a pole)."""
    code = "degenerate_geometry"


class ComputationError(ChartError):
    """Arithmetic produced a non-finite value somewhere in the chart."""
    code = "computation_failed"
