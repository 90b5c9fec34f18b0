from typing import Protocol

from .cells import SheetGrid


class SheetSource(Protocol):
    name: str

    def fetch_grid(self, document_id: str, range: str) -> SheetGrid:
        """Return exactly one sheet's grid for ``range`` (e.g. 'Sheet1!A1:G11').

        Raise GridFetchError when the document cannot be read.
        """
        ...

    def fetch_freshness_token(self, document_id: str) -> str:
        """Return an opaque marker that changes whenever the document changes.

        Raise FreshnessFetchError when the marker cannot be read.
        """
        ...
