"""
Occasions key: advisory hash used to group repeated, near-identical events

Two events share a key when everything except their date is identical, or
when the producer passed the same `_occasionsID` seed. The key is never
checked against stored rows.
"""

import hashlib
import json
from typing import Mapping, MutableMapping

OCCASIONS_SEED_KEY = "_occasionsID"


def _hash(data: Mapping) -> str:
    payload = json.dumps(data, sort_keys=True, default=str)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def compute_occasions_id(
    producer_slug: str,
    event_fields: Mapping,
    context: MutableMapping,
) -> str:
    """Compute the occasions key for an event

    Removes the `_occasionsID` seed from `context` when present.

    Args:
        producer_slug: Slug of the logging producer
        event_fields: Event row fields (logger, level, message, date, ...)
        context: Context bag, may be modified

    Returns:
        Hex md5 digest
    """
    if OCCASIONS_SEED_KEY in context:
        seed = context.pop(OCCASIONS_SEED_KEY)
        # The slug keeps two producers with the same seed apart
        return _hash({OCCASIONS_SEED_KEY: seed, "_loggerSlug": producer_slug})

    occasions_data = {**context, **event_fields}
    occasions_data.pop("date", None)
    return _hash(occasions_data)
