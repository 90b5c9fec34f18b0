from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, List

from .data.address import DocumentDescriptor
from .data.extract import extract_rows, infer_schema
from .data.source import SheetSource
from .errors import FreshnessFetchError, GridFetchError, SheetDBError
from .store.freshness import FreshnessCache
from .store.swapper import AtomicTableSwapper

logger = logging.getLogger(__name__)


@dataclass
class ReloadReport:
    reloaded: List[DocumentDescriptor] = field(default_factory=list)
    unchanged: List[DocumentDescriptor] = field(default_factory=list)


@dataclass
class ReloadCoordinator:
    """
    Reload documents whose freshness token moved since their last successful load.

    One lock covers a whole batch, so concurrent reloads of overlapping
    documents never interleave their read-compare-build-swap-update steps.
    The first failing document stops the batch; documents swapped before it
    keep their updated cache entries.
    """

    source: SheetSource
    swapper: AtomicTableSwapper
    cache: FreshnessCache
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def reload(self, descriptors: Iterable[DocumentDescriptor]) -> ReloadReport:
        report = ReloadReport()
        with self._lock:
            for descriptor in descriptors:
                try:
                    if self._reload_one(descriptor):
                        report.reloaded.append(descriptor)
                    else:
                        report.unchanged.append(descriptor)
                except SheetDBError as exc:
                    exc.descriptor = descriptor
                    logger.error(f"Unable to reload {descriptor}: {exc}")
                    raise
        return report

    def _reload_one(self, descriptor: DocumentDescriptor) -> bool:
        token = self._fetch_token(descriptor)
        if self.cache.is_fresh(descriptor, token):
            logger.debug(f"Skipping unchanged {descriptor} token={token}")
            return False

        logger.info(f"Loading {descriptor} token={token}")
        grid = self._fetch_grid(descriptor)
        table = infer_schema(grid, descriptor.schema, self.swapper.reserved_suffixes)
        rows = extract_rows(table, grid)
        self.swapper.stage_and_swap(rows)

        self.cache.put(descriptor, token)
        return True

    def _fetch_token(self, descriptor: DocumentDescriptor) -> str:
        try:
            return self.source.fetch_freshness_token(descriptor.id)
        except SheetDBError:
            raise
        except Exception as exc:
            raise FreshnessFetchError(
                f"Freshness lookup failed for {descriptor.id}: {exc}"
            ) from exc

    def _fetch_grid(self, descriptor: DocumentDescriptor):
        try:
            return self.source.fetch_grid(descriptor.id, descriptor.range)
        except SheetDBError:
            raise
        except Exception as exc:
            raise GridFetchError(
                f"Grid fetch failed for {descriptor.id} range {descriptor.range}: {exc}"
            ) from exc
