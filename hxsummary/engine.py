"""
Aggregation engine
==================

This is the heart of the project. It turns two flat attendee lists (valid and
cancelled tickets) into a `ReportData` with three views:

1) Scan every record into a BucketIndex (see `indices.py`)
   - one bucket per ticket type, gateway and sales channel
   - one bucket per (outer value, inner value) for every ordered pair of dimensions
2) Collect the sorted set of values seen for each dimension
3) Build the primary rows of each view, sorted by key
4) Densify every breakdown: each primary row gets one breakdown entry per
   value in the *global* set of the other dimension, zero-filled when the
   combination never occurred

Step 4 is what keeps breakdowns aligned across rows: in the gateway view,
every gateway row lists the same ticket types in the same order.

The scan must finish before step 2, and step 2 before any breakdown is
built. There is no partial output.
"""

from __future__ import annotations

from itertools import chain
from typing import Dict, List, Optional, Sequence, Tuple

from .indices import BucketIndex, build_index, sorted_keys
from .logger import log
from .models import (
    BREAKDOWN_ATTRS,
    DIMENSIONS,
    GATEWAY,
    ROW_TYPES,
    SALES_CHANNEL,
    TICKET_TYPE,
    AggregateBucket,
    AttendeeRecord,
    ReportData,
    zero_bucket,
)


def generate_report(
    valid_attendees: Sequence[AttendeeRecord],
    cancelled_attendees: Sequence[AttendeeRecord],
) -> ReportData:
    """Aggregate valid + cancelled attendees into a ReportData.

    Counting uses each record's own `status`; which list it came from does not
    matter. Either list may be empty. The event name comes from the first
    valid attendee, else the first cancelled attendee, else "".
    """
    index = build_index(chain(valid_attendees, cancelled_attendees))
    report = report_from_index(index, _event_name(valid_attendees, cancelled_attendees))
    log.debug(
        "Aggregated %d record(s): %d ticket type(s), %d gateway(s), %d sales channel(s).",
        index.record_count,
        len(report.rows),
        len(report.gateway_rows),
        len(report.sales_channel_rows),
    )
    return report


def report_from_index(index: BucketIndex, event_name: str = "") -> ReportData:
    """Run the densify + sort pass over a fully built (or merged) index."""
    keys: Dict[str, List[str]] = {d: sorted_keys(index, d) for d in DIMENSIONS}

    views = {
        d: tuple(_primary_row(index, d, key, keys) for key in keys[d])
        for d in DIMENSIONS
    }
    return ReportData(
        event_name=event_name,
        rows=views[TICKET_TYPE],
        gateway_rows=views[GATEWAY],
        sales_channel_rows=views[SALES_CHANNEL],
    )


def _event_name(valid: Sequence[AttendeeRecord], cancelled: Sequence[AttendeeRecord]) -> str:
    if valid:
        return valid[0].event_name
    if cancelled:
        return cancelled[0].event_name
    return ""


def _primary_row(index: BucketIndex, dimension: str, key: str, keys: Dict[str, List[str]]) -> AggregateBucket:
    bucket = index.primary[dimension][key]
    breakdowns = {
        BREAKDOWN_ATTRS[other]: _dense_breakdown(index, dimension, other, key, keys[other])
        for other in DIMENSIONS
        if other != dimension
    }
    return ROW_TYPES[dimension](
        total_paid=bucket.total_paid,
        valid_count=bucket.valid_count,
        cancelled_count=bucket.cancelled_count,
        fees=bucket.fees,
        **{dimension: key},
        **breakdowns,
    )


def _dense_breakdown(
    index: BucketIndex,
    outer: str,
    inner: str,
    outer_key: str,
    inner_keys: List[str],
) -> Optional[Tuple[AggregateBucket, ...]]:
    # No record anywhere carried this dimension: omit the breakdown.
    if not inner_keys:
        return None
    observed = index.nested[(outer, inner)].get(outer_key, {})
    return tuple(
        observed[k] if k in observed else zero_bucket(inner, k)
        for k in inner_keys
    )
