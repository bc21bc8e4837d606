"""
Foreign key validator.

Tracks the identifier range of every completed stage. Later stages resolve
their foreign keys against these ranges, so a parent can only be referenced
once its stage has finished.
"""

import random
import threading


class ForeignKeyValidator:
    """
    Registry of generated identifier ranges per entity.

    Keys are dense, so a stage's identifiers are stored as a single range.
    Registration happens between stages; lookups from workers are read-only.
    """

    def __init__(self) -> None:
        """Initialize with no registered entities."""
        self._ranges: dict[str, range] = {}
        self._lock = threading.Lock()

    def register_ids(self, entity: str, ids: range) -> None:
        """Register the identifiers generated for an entity."""
        if ids.step != 1:
            raise ValueError("Identifier ranges must be contiguous")
        with self._lock:
            self._ranges[entity] = ids

    def is_registered(self, entity: str) -> bool:
        """Whether the entity's stage has completed."""
        return entity in self._ranges

    def get_ids(self, entity: str) -> range:
        """
        Return the registered identifier range.

        Raises:
            KeyError: If the entity has not been registered
        """
        try:
            return self._ranges[entity]
        except KeyError:
            raise KeyError(f"No identifiers registered for '{entity}'") from None

    def validate_fk(self, entity: str, value: int) -> bool:
        """Validate a foreign key against the registered range."""
        ids = self._ranges.get(entity)
        return ids is not None and value in ids

    def random_id(self, entity: str, rng: random.Random) -> int:
        """Select a registered identifier uniformly at random."""
        ids = self.get_ids(entity)
        if not ids:
            raise KeyError(f"No identifiers registered for '{entity}'")
        return ids[rng.randrange(len(ids))]
