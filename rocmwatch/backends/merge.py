"""Key-wise merge of partial rocm-smi documents.

Each rocm-smi query reports a different slice of the same devices, keyed the
same way (``card0``, ``card1``, ...). The merge only knows about mappings, not
about DeviceRecord, so new supplementary queries can be added without
touching the model.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def merge_documents(root: dict[str, Any], supplement: Mapping[str, Any]) -> None:
    """Merge ``supplement`` into ``root`` in place.

    For every key present in both documents whose values are both mappings,
    the supplement's fields are copied over the root's (supplement wins on
    collision). Keys present only in the supplement and non-mapping values
    are ignored.

    Args:
        root: Base document, modified in place.
        supplement: Document with extra per-device fields.
    """
    for key, value in supplement.items():
        target = root.get(key)
        if isinstance(target, dict) and isinstance(value, Mapping):
            target.update(value)


def merge_all(
    root: dict[str, Any], supplements: Iterable[Mapping[str, Any]]
) -> dict[str, Any]:
    """Merge several supplements into ``root`` in order and return it."""
    for supplement in supplements:
        merge_documents(root, supplement)
    return root
