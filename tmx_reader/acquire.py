"""
Fetching the bytes of external tileset (TSX) documents

A map only *references* external tilesets:

    <tileset firstgid="1" source="terrain.tsx"/>

Where "terrain.tsx" actually lives is not the decoder's business. The map
assembler asks an acquirer - any object with ``acquire(path) -> bytes`` -
for the document. FileSystemAcquirer resolves paths against the map's
directory; tests and embedded games can pass their own (e.g. reading from an
archive or a dict of fixtures).

Acquirers must raise ResourceAcquisitionFailure when a document cannot be
produced. They are called synchronously and never retried.
"""

from pathlib import Path
from typing import Protocol, Union

from .errors import ResourceAcquisitionFailure


class Acquirer(Protocol):
    def acquire(self, path: str) -> bytes:
        ...


class FileSystemAcquirer:
    """
    Reads referenced documents from disk, relative to ``base_dir``.

    Absolute reference paths are used as they are.
    """

    def __init__(self, base_dir: Union[str, Path] = '.'):
        self.base_dir = Path(base_dir)

    def resolve(self, path: str) -> Path:
        return self.base_dir / path

    def acquire(self, path: str) -> bytes:
        full_path = self.resolve(path)
        try:
            return full_path.read_bytes()
        except OSError as e:
            raise ResourceAcquisitionFailure(str(full_path), e.strerror or str(e)) from e

    def __repr__(self) -> str:
        return f"FileSystemAcquirer({str(self.base_dir)!r})"
