from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

POSITION_LAST = 0xFFFFFFFF


@dataclass
class ChildEntry:
    widget: Any
    priority: int


def validate_position(position: int) -> int:
    """
    Checks that a position fits the unsigned 32 bit range used for priorities.
    Args:
        position: The requested position (lower comes first).
    Returns:
        The position as an int.
    """
    if isinstance(position, bool) or not isinstance(position, int):
        raise ValueError(f"Position must be an integer, got {position!r}")
    if position < 0 or position > POSITION_LAST:
        raise ValueError(f"Position {position} is out of range 0..{POSITION_LAST}")
    return position


class PriorityList:
    """
    Children of a priority box, kept sorted ascending by priority.
    Children with the same priority stay in insertion order: a child inserted
    (or reordered) later is placed after the existing ones.
    """

    def __init__(self):
        self._entries: List[ChildEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter([entry.widget for entry in self._entries])

    def __contains__(self, widget: Any) -> bool:
        return self._find(widget) is not None

    def _find(self, widget: Any) -> Optional[int]:
        for index, entry in enumerate(self._entries):
            if entry.widget is widget:
                return index
        return None

    def _insert_sorted(self, entry: ChildEntry) -> int:
        index = len(self._entries)
        for i, existing in enumerate(self._entries):
            if existing.priority > entry.priority:
                index = i
                break
        self._entries.insert(index, entry)
        return index

    def entries(self) -> List[ChildEntry]:
        return list(self._entries)

    def insert(self, widget: Any, priority: int = POSITION_LAST) -> int:
        """
        Inserts a widget at the place matching its priority.
        Args:
            widget: The child to insert.
            priority: Sort key, POSITION_LAST puts the child at the end.
        Returns:
            The index the child was inserted at.
        """
        priority = validate_position(priority)
        if self._find(widget) is not None:
            raise ValueError(f"{widget!r} is already in the list")
        return self._insert_sorted(ChildEntry(widget, priority))

    def reorder(self, widget: Any, priority: int) -> bool:
        """
        Changes the priority of a child and moves it accordingly.
        Returns:
            True if the priority changed, False if it was already set.
        """
        priority = validate_position(priority)
        index = self._find(widget)
        if index is None:
            raise KeyError(widget)
        entry = self._entries[index]
        if entry.priority == priority:
            return False
        del self._entries[index]
        entry.priority = priority
        self._insert_sorted(entry)
        return True

    def remove(self, widget: Any) -> Optional[ChildEntry]:
        index = self._find(widget)
        if index is None:
            return None
        return self._entries.pop(index)

    def priority_of(self, widget: Any) -> Optional[int]:
        index = self._find(widget)
        if index is None:
            return None
        return self._entries[index].priority

    def clear(self) -> List[ChildEntry]:
        entries, self._entries = self._entries, []
        return entries
