"""Exception hierarchy for hwsync.

Inventory failures fall into two groups:

- NotFoundCountError: an identity lookup matched zero or several records
  where exactly one was required. RelationEmptyError is the relational
  variant (e.g. no IP address bound to the OOB interface).
- UpstreamError: the inventory service call itself failed.

Reconciliation wraps whatever it hits into a single ReconcileError whose
message chains cluster, device and action context.
"""


class HwsyncError(Exception):
    """Base class for all hwsync errors."""


class ConfigError(HwsyncError):
    """Invalid or incomplete configuration."""


class InventoryError(HwsyncError):
    """Base class for inventory capability failures."""


class NotFoundCountError(InventoryError):
    """Identity lookup did not resolve to exactly one record."""

    def __init__(self, message: str, count: int = 0) -> None:
        super().__init__(message)
        self.count = count


class RelationEmptyError(NotFoundCountError):
    """A required relational fact is missing."""


class UpstreamError(InventoryError):
    """The inventory service call failed."""


class DriftError(HwsyncError):
    """Device state cannot be reconciled without operator input."""


class ReconcileError(HwsyncError):
    """A reconciliation pass stopped at the first failure.

    ``applied`` holds the actions already written before the failure.
    """

    def __init__(self, message: str, applied: list | None = None) -> None:
        super().__init__(message)
        self.applied = list(applied or [])
