"""
Error taxonomy for the analysis core.
"""


class ClauseLensError(Exception):
    """Base class for all ClauseLens errors."""


class MalformedAnalysisError(ClauseLensError, ValueError):
    """Raw analysis output is not an object or lacks a summary."""


class InsufficientContractsError(ClauseLensError, ValueError):
    """Comparison was requested with fewer than two analyzed contracts."""

    def __init__(self, received: int, required: int = 2):
        self.received = received
        self.required = required
        super().__init__(
            f"Select at least {required} analyzed contracts to compare "
            f"(got {received})"
        )


class ContractStateError(ClauseLensError):
    """A contract status transition is not allowed from its current status."""
