from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Entry:
    path: str
    content: bytes


class EntryTable:
    """Ordered entry sequence with a first-occurrence path index.

    Duplicate paths stay in the sequence (they are written out and listed), but
    lookups always resolve to the earliest entry with that path.
    """

    def __init__(self, entries: Optional[Iterable[Tuple[str, bytes]]] = None):
        self._entries: List[Entry] = []
        self._index: Dict[str, int] = {}
        if entries is not None:
            for path, content in entries:
                self.append(path, content)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def append(self, path: str, content: bytes) -> Entry:
        e = Entry(path=path, content=bytes(content))
        self._index.setdefault(path, len(self._entries))
        self._entries.append(e)
        return e

    def paths(self) -> List[str]:
        return [e.path for e in self._entries]

    def contains(self, path: str) -> bool:
        return path in self._index

    def get(self, path: str) -> Optional[Entry]:
        pos = self._index.get(path)
        if pos is None:
            return None
        return self._entries[pos]

    def find_first_suffix(self, suffix: str) -> Optional[Entry]:
        # Linear scan in table order; the path index cannot answer suffix queries.
        for e in self._entries:
            if e.path.endswith(suffix):
                return e
        return None

    def items(self) -> List[Tuple[str, bytes]]:
        return [(e.path, e.content) for e in self._entries]
