"""Tagged field updates for partial-update requests.

A field in an update request is in one of three states:

- ``UNCHANGED``: absent from the request, the stored value is kept
- ``CLEAR``: explicitly null, the stored value is removed
- ``Set(value)``: a new value

``field_update`` derives the state from a pydantic model by looking at
``model_fields_set``, so ``{"assignee": null}`` and ``{}`` stay distinct.
"""

from dataclasses import dataclass
from typing import Any


class _Unchanged:
    def __repr__(self):
        return "UNCHANGED"


class _Clear:
    def __repr__(self):
        return "CLEAR"


UNCHANGED = _Unchanged()
CLEAR = _Clear()


@dataclass(frozen=True)
class Set:
    value: Any


def field_update(model, name: str, blank_is_unchanged: bool = False):
    if name not in model.model_fields_set:
        return UNCHANGED
    value = getattr(model, name)
    if value is None:
        return CLEAR
    if isinstance(value, str) and not value.strip():
        return UNCHANGED if blank_is_unchanged else CLEAR
    return Set(value)


@dataclass
class TaskChanges:
    title: Any = UNCHANGED
    description: Any = UNCHANGED
    assignee: Any = UNCHANGED
    due_date: Any = UNCHANGED
    priority: Any = UNCHANGED

