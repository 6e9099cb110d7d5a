"""Change notifications for record tables.

`record_changed` fires after a tracked row is inserted, updated or deleted.
`subscribe` wraps it with a per-table, per-field filter so callers can follow
e.g. "submissions of student 7" the way a live list view would.
"""

import logging
from typing import Any, Callable

from django.dispatch import Signal

logger = logging.getLogger(__name__)

# kwargs: table, event, record
record_changed = Signal()

Listener = Callable[[str, str, Any], None]


def publish(table: str, event: str, record: Any) -> None:
    record_changed.send(sender=type(record), table=table, event=event, record=record)


def subscribe(table: str, listener: Listener, **filters: Any) -> Callable[[], None]:
    """Register `listener(table, event, record)` for changes to one table.

    Only records whose attributes equal every value in `filters` are
    delivered. Returns a callable that removes the subscription.
    """
    def receiver(sender, table: str = "", event: str = "", record: Any = None, **kwargs: Any) -> None:
        if table != wanted_table:
            return
        if any(getattr(record, field, None) != value for field, value in filters.items()):
            return
        listener(table, event, record)

    wanted_table = table
    record_changed.connect(receiver, weak=False)
    logger.debug("Subscribed %r to %s %s", listener, table, filters)

    def unsubscribe() -> None:
        record_changed.disconnect(receiver)

    return unsubscribe
