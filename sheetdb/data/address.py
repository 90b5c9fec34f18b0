from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List
from urllib.parse import unquote

from ..errors import AddressError

SCHEME = "sheetdb:"

_DOC_ID = r"[A-Za-z0-9_-]+"
_SCHEMA_NAME = r"[A-Za-z][A-Za-z0-9_]*"
_RANGE = r"[^/!,]+![A-Za-z]+[0-9]+:[A-Za-z]+[0-9]+"

# doc=(id=abcdefg,range=MySheet!A1:G11)
_DOC = rf"doc=\(id=({_DOC_ID}),range=({_RANGE})\)"

# sheetdb://doc=(id=abc,range=Sheet1!A1:G11),doc=(id=xyz,range=Sheet2!A1:G11)/MySchema
_ADDRESS_RE = re.compile(
    rf"{re.escape(SCHEME)}//(?P<docs>{_DOC}(?:,{_DOC})*)/(?P<schema>{_SCHEMA_NAME})"
)
_DOC_RE = re.compile(_DOC)


@dataclass(frozen=True)
class DocumentDescriptor:
    """One document range to load into ``schema``."""

    id: str
    range: str
    schema: str

    def __str__(self) -> str:
        return f"{self.id}:{self.range}->{self.schema}"


def accepts_address(address: str) -> bool:
    return isinstance(address, str) and address.startswith(SCHEME)


def parse_address(address: str) -> List[DocumentDescriptor]:
    """Parse a connection address into descriptors, first-seen order, no duplicates."""
    if not isinstance(address, str):
        raise AddressError(f"Connection address must be a string, got {type(address).__name__}")

    match = _ADDRESS_RE.fullmatch(address)
    if match is None:
        raise AddressError(f"Invalid connection address: {address}")

    schema = match.group("schema")
    found = dict.fromkeys(
        DocumentDescriptor(id=m.group(1), range=unquote(m.group(2)), schema=schema)
        for m in _DOC_RE.finditer(match.group("docs"))
    )
    return list(found)
