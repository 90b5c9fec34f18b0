from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, Optional


@dataclass
class FreshnessCache:
    """Last applied freshness token per document descriptor.

    Entries are written only after a table was swapped in successfully and are
    never evicted. Callers serialize access (the reload coordinator holds its
    batch lock around every read-compare-update).
    """

    _tokens: Dict[Hashable, str] = field(default_factory=dict, repr=False)

    def get(self, descriptor: Hashable) -> Optional[str]:
        return self._tokens.get(descriptor)

    def put(self, descriptor: Hashable, token: str) -> None:
        self._tokens[descriptor] = token

    def is_fresh(self, descriptor: Hashable, token: str) -> bool:
        return descriptor in self._tokens and self._tokens[descriptor] == token

    def __contains__(self, descriptor: Hashable) -> bool:
        return descriptor in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)
