"""Ordered storage of registration entries with lookup fallback.

Entries are kept in insertion order and searched linearly; the first match
wins. Lookup for resolution is lenient about keys, whereas lookup for
registration and removal matches the (service, key) pair exactly, so that a
container never holds two entries for the same pair.
"""

from typing import Any, Iterator, Optional

from simple_container.domain import RegistrationEntry


class EntrySet:
    """Ordered collection of :class:`RegistrationEntry` objects.

    Example:
        >>> entries = EntrySet()
        >>> entries.get_or_create(Database, None).add(lambda c: db)
        >>> entries.find(Database, None)       # the entry above
        >>> entries.find(Database, "replica")  # None
    """

    def __init__(self, entries: Optional[list[RegistrationEntry]] = None):
        self._entries: list[RegistrationEntry] = entries if entries is not None else []

    def find(self, service: Any, key: Optional[str]) -> Optional[RegistrationEntry]:
        """Find the entry that should serve a request.

        Args:
            service: The requested service, or None to look up by key alone.
            key: The requested key.

        Returns:
            * service None: the first entry with the key, whatever its service.
            * key given: the entry for exactly (service, key).
            * key None: the entry for (service, None), or else the first entry
              for the service under any key.
            None if nothing matches.
        """
        if service is None:
            return next((e for e in self._entries if e.key == key), None)

        if key is None:
            return self.find_exact(service, None) or next(
                (e for e in self._entries if e.service == service), None
            )

        return self.find_exact(service, key)

    def find_exact(self, service: Any, key: Optional[str]) -> Optional[RegistrationEntry]:
        return next((e for e in self._entries if e.matches(service, key)), None)

    def get_or_create(self, service: Any, key: Optional[str]) -> RegistrationEntry:
        entry = self.find_exact(service, key)
        if entry is None:
            entry = RegistrationEntry(service, key)
            self._entries.append(entry)
        return entry

    def remove(self, service: Any, key: Optional[str]) -> bool:
        """Remove the entry for exactly (service, key), returning whether one existed."""
        entry = self.find_exact(service, key)
        if entry is None:
            return False
        self._entries.remove(entry)
        return True

    def entries_for(self, service: Any) -> list[RegistrationEntry]:
        """Every entry for ``service`` under any key, in insertion order."""
        return [e for e in self._entries if e.service == service]

    def snapshot(self) -> "EntrySet":
        """Copy the list of entries into a new set.

        The entries themselves are shared: factories added to an existing pair
        are seen by both sets, while entries added or removed afterwards are not.
        """
        return EntrySet(list(self._entries))

    def __iter__(self) -> Iterator[RegistrationEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
