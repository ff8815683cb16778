# entyre_cms/utils/order.py
from typing import Iterable, List, Sequence

from entyre_cms.extensions import db

# Phase-one indices start this far above the current maximum so they can never
# collide with a live index or with the final 1..N range.
TEMP_INDEX_OFFSET = 1000


def next_index(model, order_field: str) -> int:
    """max(order_field) + 1, or 1 for an empty table."""
    column = getattr(model, order_field)
    current = db.session.query(db.func.max(column)).scalar()
    return (current or 0) + 1


def apply_order(items: Sequence, order_field: str) -> List:
    """
    Write ``order_field`` = 1..N onto ``items`` in their given order without
    ever holding two rows at the same index.

    Phase one parks every row at ``max + TEMP_INDEX_OFFSET + position`` and
    flushes; phase two writes the final values. The caller owns the
    transaction, so both phases commit or roll back together.
    """
    if not items:
        return []

    current_max = max(getattr(item, order_field) or 0 for item in items)
    parking = current_max + TEMP_INDEX_OFFSET

    for position, item in enumerate(items):
        setattr(item, order_field, parking + position)
    db.session.flush()

    for position, item in enumerate(items, start=1):
        setattr(item, order_field, position)
    db.session.flush()

    return list(items)


def merge_order(listed_ids: Iterable[str], current: Sequence, key: str = "id") -> List:
    """
    Listed rows first, in the given order; unlisted rows after them in their
    previous relative order.
    """
    by_id = {getattr(item, key): item for item in current}
    listed = [by_id[item_id] for item_id in listed_ids]
    seen = {getattr(item, key) for item in listed}
    return listed + [item for item in current if getattr(item, key) not in seen]
