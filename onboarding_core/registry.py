"""
Registry of onboarding categories.

Holds an ordered, immutable snapshot of entries. Every write builds a new tuple
and swaps it in under a lock, so readers always see a complete collection.
Category names are free text on every write path. Persistence is the caller's concern.
"""

import threading
import uuid
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .exceptions import EntryNotFoundError
from .schemas.onboarding_schemas import Entry, EntryCandidate
from .utils.logger import get_logger

CandidateLike = Union[EntryCandidate, Entry, dict]


def new_entry_id() -> str:
    """Mint a fresh opaque entry identifier."""
    return str(uuid.uuid4())


def _as_candidate(candidate: CandidateLike) -> EntryCandidate:
    if isinstance(candidate, EntryCandidate):
        return candidate
    if isinstance(candidate, Entry):
        return EntryCandidate(name=candidate.name, id=candidate.id)
    return EntryCandidate.model_validate(candidate)


class Registry:
    """Ordered collection of named entries."""

    def __init__(self, entries: Iterable[Entry] = ()):
        self._lock = threading.RLock()
        self._entries: Tuple[Entry, ...] = tuple(entries)
        self.logger = get_logger()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def list(self) -> Tuple[Entry, ...]:
        """Current entries in insertion order."""
        return self._entries

    def get(self, entry_id: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def find_by_name(self, name: str) -> List[Entry]:
        return [entry for entry in self._entries if entry.name == name]

    def selection_choices(self) -> List[Tuple[str, str]]:
        """(label, value) pairs for a category drop-down."""
        return [(entry.name, entry.name) for entry in self._entries]

    def replace_all(
        self,
        candidates: Optional[Iterable[CandidateLike]],
        preserve_ids: bool = False,
    ) -> Tuple[Entry, ...]:
        """
        Replace every entry with one built from each candidate.

        Args:
            candidates: Submitted rows; None leaves the registry untouched
            preserve_ids: Reuse ids of current entries instead of minting new ones.
                A candidate keeps the id it carries when that id is currently held,
                otherwise it takes the id of the first unclaimed entry with the same name.

        Returns:
            The entries now held
        """
        if candidates is None:
            return self._entries

        submitted = [_as_candidate(candidate) for candidate in candidates]

        with self._lock:
            current = self._entries
            if preserve_ids:
                entries = self._reconcile(current, submitted)
            else:
                entries = tuple(Entry(name=c.name, id=new_entry_id()) for c in submitted)
            self._entries = entries

        self.logger.info(
            "Registry entries replaced",
            extra={
                "previous_count": len(current),
                "entry_count": len(entries),
                "preserve_ids": preserve_ids,
            },
        )
        return entries

    @staticmethod
    def _reconcile(current: Tuple[Entry, ...], submitted: List[EntryCandidate]) -> Tuple[Entry, ...]:
        held_ids = {entry.id for entry in current}
        claimed = set()

        # Explicit ids first, so a name match cannot steal an id another row asks for
        for candidate in submitted:
            if candidate.id in held_ids and candidate.id not in claimed:
                claimed.add(candidate.id)

        unclaimed_by_name: Dict[str, List[str]] = {}
        for entry in current:
            if entry.id not in claimed:
                unclaimed_by_name.setdefault(entry.name, []).append(entry.id)

        explicit = set()
        entries = []
        for candidate in submitted:
            if candidate.id in claimed and candidate.id not in explicit:
                explicit.add(candidate.id)
                entries.append(Entry(name=candidate.name, id=candidate.id))
                continue
            same_name = unclaimed_by_name.get(candidate.name)
            if same_name:
                entries.append(Entry(name=candidate.name, id=same_name.pop(0)))
            else:
                entries.append(Entry(name=candidate.name, id=new_entry_id()))
        return tuple(entries)

    def reset(self, entries: Iterable[Entry]) -> None:
        """Swap in exactly ``entries``, ids included (used to roll back a failed save)."""
        snapshot = tuple(entries)
        with self._lock:
            self._entries = snapshot

    def add(self, name: str) -> Entry:
        """Append a new entry with a fresh id."""
        entry = Entry(name=name, id=new_entry_id())
        with self._lock:
            self._entries = self._entries + (entry,)
        self.logger.info("Registry entry added", extra={"entry_id": entry.id, "entry_name": name})
        return entry

    def rename(self, entry_id: str, new_name: str) -> Entry:
        """Change the name of an entry, keeping its id and position."""
        with self._lock:
            index = self._index_of(entry_id)
            renamed = Entry(name=new_name, id=entry_id)
            entries = list(self._entries)
            entries[index] = renamed
            self._entries = tuple(entries)
        self.logger.info(
            "Registry entry renamed", extra={"entry_id": entry_id, "entry_name": new_name}
        )
        return renamed

    def remove(self, entry_id: str) -> Entry:
        """Drop an entry; its id is never handed out again."""
        with self._lock:
            index = self._index_of(entry_id)
            removed = self._entries[index]
            self._entries = self._entries[:index] + self._entries[index + 1 :]
        self.logger.info("Registry entry removed", extra={"entry_id": entry_id})
        return removed

    def _index_of(self, entry_id: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return index
        raise EntryNotFoundError(f"Entry not found: entry_id={entry_id}", entry_id=entry_id)
