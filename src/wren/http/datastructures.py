"""Read-only multi-valued mappings for request metadata.

``Headers`` and ``QueryParams`` share one storage layout: each key maps to
the ordered list of its values. ``__getitem__`` returns the first value,
``get_list`` all of them.
"""

from collections.abc import Iterable, Iterator, Mapping
from urllib.parse import parse_qsl


class MultiDict(Mapping[str, str]):
    """Immutable ``str -> [str, ...]`` mapping built once at construction."""

    __slots__ = ("_data",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        data: dict[str, list[str]] = {}
        for key, value in pairs:
            data.setdefault(self._key(key), []).append(value)
        object.__setattr__(self, "_data", data)

    @staticmethod
    def _key(key: str) -> str:
        return key

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._data[self._key(key)][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._key(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(self._key(key))
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return every value for *key*, in arrival order."""
        return list(self._data.get(self._key(key), ()))


class Headers(MultiDict):
    """Case-insensitive request headers. Keys are stored lower-cased."""

    __slots__ = ()

    @staticmethod
    def _key(key: str) -> str:
        return key.lower()

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> "Headers":
        """Build from ASGI ``(name, value)`` byte pairs."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)


class QueryParams(MultiDict):
    """Query string parameters; blank values are kept."""

    __slots__ = ()

    @classmethod
    def parse(cls, query_string: bytes | str) -> "QueryParams":
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        return cls(parse_qsl(query_string, keep_blank_values=True))


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header into a name-value dict.

    Pairs without ``=`` are skipped; the first occurrence of a name wins.
    """
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        name, sep, value = pair.partition("=")
        name = name.strip()
        if sep and name and name not in cookies:
            cookies[name] = value.strip().strip('"')
    return cookies
