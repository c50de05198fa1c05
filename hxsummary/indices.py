"""
Bucket indices (precomputed lookup tables)
==========================================

The aggregation engine first scans every attendee record into a `BucketIndex`:

- `primary[dimension][value]` is the bucket for one ticket type / gateway /
  sales channel.
- `nested[(outer, inner)][outer_value][inner_value]` is the bucket for one
  combination of two dimensions, for every ordered pair of dimensions.
  Example: `nested[("gateway", "ticket_type")]["Stripe"]["VIP"]`.

Buckets are immutable, so every update is an explicit upsert that stores a
new bucket in exactly one slot.

Indices built from separate chunks of records can be combined with
`merge_indices`; the sums are associative and commutative, so merging
partial indices gives the same totals as one pass over all records.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .models import DIMENSIONS, AggregateBucket, AttendeeRecord, zero_bucket

PairKey = Tuple[str, str]
BucketTable = Dict[str, AggregateBucket]

# Every ordered pair of distinct dimensions (outer, inner).
DIMENSION_PAIRS: Tuple[PairKey, ...] = tuple(
    (outer, inner) for outer in DIMENSIONS for inner in DIMENSIONS if outer != inner
)


def _empty_primary() -> Dict[str, BucketTable]:
    return {d: {} for d in DIMENSIONS}


def _empty_nested() -> Dict[PairKey, Dict[str, BucketTable]]:
    return {pair: {} for pair in DIMENSION_PAIRS}


@dataclass
class BucketIndex:
    """Primary and two-level bucket maps for one set of records."""
    primary: Dict[str, BucketTable] = field(default_factory=_empty_primary)
    nested: Dict[PairKey, Dict[str, BucketTable]] = field(default_factory=_empty_nested)
    record_count: int = 0


def _upsert(table: BucketTable, dimension: str, key: str, record: AttendeeRecord) -> None:
    current = table.get(key)
    if current is None:
        current = zero_bucket(dimension, key)
    table[key] = current.with_record(record)


def add_record(index: BucketIndex, record: AttendeeRecord) -> None:
    """Add one record to every primary and nested bucket it belongs to."""
    values = {d: record.dimension_value(d) for d in DIMENSIONS}

    for dimension, value in values.items():
        if value is None:
            continue
        _upsert(index.primary[dimension], dimension, value, record)

    for outer, inner in DIMENSION_PAIRS:
        outer_value, inner_value = values[outer], values[inner]
        if outer_value is None or inner_value is None:
            continue
        inner_table = index.nested[(outer, inner)].setdefault(outer_value, {})
        _upsert(inner_table, inner, inner_value, record)

    index.record_count += 1


def build_index(records: Iterable[AttendeeRecord]) -> BucketIndex:
    """Scan records into a fresh BucketIndex."""
    index = BucketIndex()
    for r in records:
        add_record(index, r)
    return index


def _merge_tables(a: BucketTable, b: BucketTable) -> BucketTable:
    out = dict(a)
    for key, bucket in b.items():
        out[key] = out[key].merged(bucket) if key in out else bucket
    return out


def merge_indices(a: BucketIndex, b: BucketIndex) -> BucketIndex:
    """Combine two partial indices by key-wise addition. Inputs are left untouched."""
    merged = BucketIndex(record_count=a.record_count + b.record_count)
    for d in DIMENSIONS:
        merged.primary[d] = _merge_tables(a.primary[d], b.primary[d])
    for pair in DIMENSION_PAIRS:
        left, right = a.nested[pair], b.nested[pair]
        merged.nested[pair] = {
            outer: _merge_tables(left.get(outer, {}), right.get(outer, {}))
            for outer in set(left) | set(right)
        }
    return merged


# -----------------------------
# Ordering
# -----------------------------

def _char_class(c: str) -> int:
    # Spaces, punctuation and symbols < digits < letters
    cat = unicodedata.category(c)
    if cat[0] in "PSZC":
        return 0
    if cat[0] == "N":
        return 1
    return 2


def collation_key(text: str) -> Tuple[Tuple[Tuple[int, str], ...], str, str]:
    """Sort key approximating locale-aware comparison.

    Primary: letters without accents, case-folded ("Éclair" ~ "eclair"), with
    punctuation and symbols ordered before digits and digits before letters
    ("~Early" < "10" < "General").
    Secondary: accents. Tertiary: lowercase before uppercase ("a" < "A").
    Independent of the process locale, so ordering is reproducible.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return (tuple((_char_class(c), c) for c in base), text.casefold(), text.swapcase())


def sorted_keys(index: BucketIndex, dimension: str) -> List[str]:
    """All distinct values seen for a dimension, in collation order."""
    return sorted(index.primary[dimension], key=collation_key)
