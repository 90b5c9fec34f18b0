from .freshness import FreshnessCache
from .swapper import AtomicTableSwapper

__all__ = [
    "FreshnessCache",
    "AtomicTableSwapper",
]
