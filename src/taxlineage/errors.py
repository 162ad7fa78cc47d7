from __future__ import annotations


class TaxLineageError(Exception):
    """Base class for every error raised by taxlineage."""


class ConfigError(TaxLineageError, ValueError):
    pass


class OutOfRangeError(TaxLineageError, ValueError):
    """
    An id does not fit the dense table it indexes. Fatal while loading the
    reference tables; reported per line during a batch.
    """

    def __init__(self, kind: str, value: int, capacity: int) -> None:
        super().__init__(f"{kind} {value} outside [0, {capacity})")
        self.kind = kind
        self.value = value
        self.capacity = capacity


class LineageError(TaxLineageError):
    """The parent chain of a node cannot be walked to the root."""

    def __init__(self, message: str, node_id: int) -> None:
        super().__init__(message)
        self.node_id = node_id


class CycleOrDepthExceeded(LineageError):
    pass


class MissingParentError(LineageError):
    pass


class DeadlineExceeded(TaxLineageError):
    pass
