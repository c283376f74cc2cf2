"""Sequential number assignment backed by persisted counters.

``next_value`` hands out 1, 2, 3, ... per named sequence. It never keeps
state in the process: the counter row is advanced with a single atomic
``UPDATE counters SET value = value + 1`` and read back inside the same
transaction, so concurrent callers (threads, gunicorn workers, other hosts)
always receive distinct values. On PostgreSQL the UPDATE holds the row lock
until commit, which makes the read-after-write safe.

The first call for a sequence seeds the counter from the largest number
already stored in the numbered column, so numbering never restarts when the
counter table is created on top of existing data. Numbers consumed by a
failed insert are not given back (gaps are tolerated, reuse is not).
"""

from typing import Callable, Optional

from django.db import IntegrityError, transaction
from django.db.models import F

from .models import Counter


def next_value(name: str, seed: Optional[Callable[[], int]] = None) -> int:
    """Atomically advance the ``name`` sequence and return the new value.

    Args:
        name: Sequence name, e.g. ``"orders.number"``.
        seed: Optional callable returning the current maximum already in
            use; only consulted when the counter row does not exist yet.

    Returns:
        int: The next number of the sequence (``1`` for a fresh sequence).
    """
    with transaction.atomic():
        updated = Counter.objects.filter(name=name).update(value=F("value") + 1)
        if not updated:
            start = (seed() or 0) if seed else 0
            try:
                # Nested savepoint: a concurrent creator may win the insert.
                with transaction.atomic():
                    Counter.objects.create(name=name, value=start + 1)
            except IntegrityError:
                Counter.objects.filter(name=name).update(value=F("value") + 1)
        return Counter.objects.values_list("value", flat=True).get(name=name)

