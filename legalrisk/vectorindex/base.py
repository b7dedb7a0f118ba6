"""Vector index contract.

Entries are keyed by string id and carry a flat metadata dict. Filters are
plain equality constraints ANDed together; each backend translates them into
its own syntax. Similarity is normalised to [0, 1], higher meaning closer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

MetadataValue = str | int | float | bool | list[str]


@dataclass(frozen=True)
class VectorEntry:
    id: str
    vector: list[float]
    metadata: dict[str, MetadataValue] = field(default_factory=dict)


@dataclass(frozen=True)
class VectorMatch:
    """One ranked query result."""

    id: str
    similarity: float
    metadata: dict[str, object] = field(default_factory=dict)


def sanitize_metadata(metadata: dict[str, object]) -> dict[str, MetadataValue]:
    """Drop None values and coerce lists to lists of strings.

    Vector stores accept only scalars and string lists as metadata values.
    """
    clean: dict[str, MetadataValue] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            clean[key] = [str(item) for item in value if item is not None]
        elif isinstance(value, (str, int, float, bool)):
            clean[key] = value
        else:
            clean[key] = str(value)
    return clean


def clamp_similarity(score: float | None) -> float:
    if score is None:
        return 0.0
    return max(0.0, min(1.0, float(score)))


class BaseVectorIndex(ABC):
    """Contract for all vector index backends."""

    def upsert(self, entry_id: str, vector: list[float], metadata: dict[str, object]) -> None:
        """Insert or replace one entry."""
        self.upsert_many([VectorEntry(entry_id, vector, sanitize_metadata(metadata))])

    @abstractmethod
    def upsert_many(self, entries: list[VectorEntry]) -> None:
        """Insert or replace entries in one call.

        Raises:
            VectorIndexError: on backend failure.
        """

    @abstractmethod
    def query(
        self,
        vector: list[float],
        top_k: int,
        metadata_filter: dict[str, MetadataValue],
    ) -> list[VectorMatch]:
        """Nearest-neighbour search restricted to entries matching every
        filter field, best match first.

        Raises:
            VectorIndexError: on backend failure.
        """

    @abstractmethod
    def update_metadata(self, entry_id: str, metadata: dict[str, object]) -> None:
        """Merge fields into an entry's metadata without touching its vector.

        Raises:
            VectorIndexError: on backend failure.
        """

    def close(self) -> None:
        """Release underlying connections. No-op by default."""
