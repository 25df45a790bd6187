# models/catalog.py

import time
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Tuple

from .butterfly import Butterfly

class CollectionWarning(NamedTuple):
    """A per-item problem noticed while scraping or collecting assets."""
    identity: str
    stage: str
    cause: str

def dedup_by_jp_name(butterflies: Iterable[Butterfly]) -> list:
    """
    Sorts by Japanese name and keeps the first butterfly of each name.
    The sort is stable, so among duplicates the earliest one in the input wins.
    Unnamed butterflies are all kept.
    """
    result = []
    for butterfly in sorted(butterflies, key=lambda b: b.jp_name):
        if butterfly.jp_name and result and result[-1].jp_name == butterfly.jp_name:
            continue
        result.append(butterfly)
    return result

@dataclass(frozen=True)
class Catalog:
    """
    The finished collection, exactly as it is written to the snapshot file.
    """
    records: Tuple[Butterfly, ...]
    record_count: int
    document_count: int
    created_at: int

    @classmethod
    def build(cls, butterflies: Iterable[Butterfly], document_count: int) -> "Catalog":
        # Records are copies of the collector's butterflies
        records = tuple(Butterfly.from_dict(b.to_dict()) for b in dedup_by_jp_name(butterflies))
        return cls(
            records=records,
            record_count=len(records),
            document_count=document_count,
            created_at=int(time.time())
        )

    def to_dict(self) -> dict:
        return {
            'records': [b.to_dict() for b in self.records],
            'record_count': self.record_count,
            'document_count': self.document_count,
            'created_at': self.created_at
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Catalog":
        return cls(
            records=tuple(Butterfly.from_dict(entry) for entry in data['records']),
            record_count=int(data['record_count']),
            document_count=int(data['document_count']),
            created_at=int(data['created_at'])
        )
