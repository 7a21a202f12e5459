"""
modules/errors.py
-----------------
Typed failures raised by the optimization pipeline.

Every error carries a machine-readable ``code`` and the pipeline ``stage``
that raised it.  Messages follow the ``ERROR_<CODE>: detail`` convention so a
log line is enough to tell which guard fired.

  ValidationError   : malformed preferences / inputs, rejected before compute
  DataError         : a destination (or its coordinates) cannot be resolved
  ComputationError  : 2-opt search budget exhausted; degraded, NOT raised by
                      the pipeline (recorded on the result instead)
"""

from __future__ import annotations


class TripOptimizationError(RuntimeError):
    """Base class for every failure surfaced by the optimizer."""

    code: str = "STAGE_FAILED"

    def __init__(
        self,
        detail: str,
        *,
        stage: str | None = None,
        code: str | None = None,
    ) -> None:
        if code is not None:
            self.code = code
        self.detail = detail
        self.stage = stage
        super().__init__(f"ERROR_{self.code}: {detail}")

    def to_dict(self) -> dict:
        return {"code": self.code, "stage": self.stage, "detail": self.detail}


class ValidationError(TripOptimizationError):
    code = "INVALID_INPUT"


class DataError(TripOptimizationError):
    code = "MISSING_DESTINATION_DATA"

    def __init__(
        self,
        detail: str,
        *,
        destination_id: str | None = None,
        stage: str | None = None,
        code: str | None = None,
    ) -> None:
        self.destination_id = destination_id
        super().__init__(detail, stage=stage, code=code)


class ComputationError(TripOptimizationError):
    code = "SEARCH_BUDGET_EXHAUSTED"
