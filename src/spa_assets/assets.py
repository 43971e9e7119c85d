"""Asset sources: the two places a UI bundle can be read from.

An ``AssetSource`` is a read-only hierarchy of named files with a single
capability, ``open(name)``. Names are slash-separated and relative to the
source root. Missing entries (including directories) raise
``FileNotFoundError``.

- ``EmbeddedBundle`` holds the bundle shipped inside the package. It is read
  into memory once, at startup; files have no modification time.
- ``DirectoryAssets`` reads from a directory on disk chosen at startup.

Both are immutable after construction and shared by every request.
"""

import errno
import io
import logging
import os
import posixpath
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from types import MappingProxyType
from typing import BinaryIO, TypeAlias

from spa_assets.errors import ConfigurationError

logger = logging.getLogger("spa_assets.assets")


@dataclass(frozen=True, slots=True)
class AssetInfo:
    """Metadata reported by an open asset."""

    name: str
    size: int
    mtime: datetime | None = None


class AssetFile:
    """An open asset handle.

    Wraps a binary stream. Use as a context manager so the stream is closed
    on every exit path.
    """

    __slots__ = ("name", "stream")

    def __init__(self, name: str, stream: BinaryIO) -> None:
        self.name = name
        self.stream = stream

    def stat(self) -> AssetInfo:
        raise NotImplementedError

    def seekable(self) -> bool:
        return self.stream.seekable()

    def close(self) -> None:
        self.stream.close()

    @property
    def closed(self) -> bool:
        return self.stream.closed

    def __enter__(self) -> "AssetFile":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class MemoryFile(AssetFile):
    """An embedded asset backed by an in-memory buffer."""

    __slots__ = ("_size",)

    def __init__(self, name: str, data: bytes) -> None:
        super().__init__(name, io.BytesIO(data))
        self._size = len(data)

    def stat(self) -> AssetInfo:
        return AssetInfo(name=posixpath.basename(self.name), size=self._size)


class DiskFile(AssetFile):
    """An asset opened from a directory on disk."""

    __slots__ = ()

    def stat(self) -> AssetInfo:
        st = os.fstat(self.stream.fileno())
        return AssetInfo(
            name=posixpath.basename(self.name),
            size=st.st_size,
            mtime=datetime.fromtimestamp(st.st_mtime, UTC),
        )


def _not_found(name: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, "file does not exist", name)


def _is_hidden(name: str) -> bool:
    """Bundling skips files and directories starting with ``.`` or ``_``."""
    return name.startswith((".", "_"))


def _walk(node: Traversable, prefix: str) -> Iterator[tuple[str, bytes]]:
    for entry in node.iterdir():
        if _is_hidden(entry.name):
            continue
        name = f"{prefix}/{entry.name}"
        if entry.is_dir():
            yield from _walk(entry, name)
        elif entry.is_file():
            yield name, entry.read_bytes()


@dataclass(frozen=True, slots=True)
class EmbeddedBundle:
    """The UI bundle shipped as package data, held in memory.

    Keys of ``files`` include the bundle root (``"build/index.html"``), so a
    handler serving the bundle uses that root as its prefix.
    """

    files: Mapping[str, bytes]

    @classmethod
    def from_mapping(cls, files: Mapping[str, bytes | str]) -> "EmbeddedBundle":
        """Build a bundle from ``name -> content`` pairs (str is UTF-8 encoded)."""
        frozen = {
            name.strip("/"): data.encode("utf-8") if isinstance(data, str) else data
            for name, data in files.items()
        }
        return cls(files=MappingProxyType(frozen))

    @classmethod
    def from_package(cls, package: str = "spa_assets", root: str = "build") -> "EmbeddedBundle":
        """Load every non-hidden file under *root* in *package*'s data."""
        node = resources.files(package).joinpath(root)
        if not node.is_dir():
            logger.warning("No embedded bundle at %s/%s", package, root)
            return cls.from_mapping({})
        return cls.from_mapping(dict(_walk(node, root)))

    def open(self, name: str) -> MemoryFile:
        data = self.files.get(name)
        if data is None:
            raise _not_found(name)
        return MemoryFile(name, data)

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True, slots=True)
class DirectoryAssets:
    """Assets served from a directory on disk.

    Security: resolves symlinks and verifies the final path is within the
    root; anything outside is reported as missing.
    """

    root: Path

    def __post_init__(self) -> None:
        root = Path(self.root).resolve()
        if not root.is_dir():
            msg = f"Assets path {str(self.root)!r} is not a directory"
            raise ConfigurationError(msg)
        object.__setattr__(self, "root", root)

    def open(self, name: str) -> DiskFile:
        try:
            path = (self.root / name).resolve()
        except ValueError as exc:  # embedded NUL byte
            raise _not_found(name) from exc
        if not path.is_relative_to(self.root) or path.is_dir():
            raise _not_found(name)
        try:
            stream = path.open("rb")
        except IsADirectoryError as exc:
            raise _not_found(name) from exc
        return DiskFile(name, stream)


# The two backing stores; the resolver only ever calls ``open``.
AssetSource: TypeAlias = EmbeddedBundle | DirectoryAssets
