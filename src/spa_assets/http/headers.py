"""Immutable, case-insensitive request headers.

Keeps the raw byte pairs from the ASGI scope and decodes values lazily.
Validator headers such as ``If-None-Match`` may legally arrive split over
several lines, so list access is first-class here.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Case-insensitive view over ASGI header pairs.

    ``headers["etag"]`` is the first value; ``get_list`` gives every value
    and ``get_joined`` folds them into one comma-separated string.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    def _values(self, key: str) -> Iterator[str]:
        wanted = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == wanted:
                yield value.decode("latin-1")

    def __getitem__(self, key: str) -> str:
        for value in self._values(key):
            return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and next(self._values(key), None) is not None

    def __iter__(self) -> Iterator[str]:
        names = dict.fromkeys(name.decode("latin-1").lower() for name, _ in self._raw)
        return iter(names)

    def __len__(self) -> int:
        return len(dict.fromkeys(name.lower() for name, _ in self._raw))

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*, or *default*."""
        return next(self._values(key), default)

    def get_list(self, key: str) -> list[str]:
        """Every value for *key*, in arrival order."""
        return list(self._values(key))

    def get_joined(self, key: str) -> str:
        """All values for *key* joined with ``", "`` (empty if missing)."""
        return ", ".join(self._values(key))
