__version__ = "0.4.0"

from .accession_index import AccessionIndex, AccessionRecord
from .batch import BatchProcessor, BatchReport
from .config import LookupConfig
from .errors import (
    ConfigError,
    CycleOrDepthExceeded,
    DeadlineExceeded,
    LineageError,
    MissingParentError,
    OutOfRangeError,
    TaxLineageError,
)
from .gi_index import GIIndex
from .lineage import LineageResolver
from .pipeline import run_lookup
from .taxonomy import TaxonomyTree

__all__ = [
    "AccessionIndex",
    "AccessionRecord",
    "BatchProcessor",
    "BatchReport",
    "ConfigError",
    "CycleOrDepthExceeded",
    "DeadlineExceeded",
    "GIIndex",
    "LineageError",
    "LineageResolver",
    "LookupConfig",
    "MissingParentError",
    "OutOfRangeError",
    "TaxLineageError",
    "TaxonomyTree",
    "run_lookup",
]
