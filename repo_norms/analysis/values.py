"""Type-aware value tokens and tallies.

Values are compared through tagged tokens rather than string keys: the token
of a value records its JSON type next to the value itself, so ``0`` and
``"0"``, or ``True`` and ``1``, never fall into the same bucket. Mappings are
compared by content regardless of key order; sequences are order-sensitive.
"""

import copy
from typing import Any, Dict, Hashable, List, Mapping, Optional, Tuple

NULL_TOKEN: Tuple[str] = ("null",)


def value_token(value: Any) -> Hashable:
    """Hashable, type-tagged token for a JSON-like value.

    Two values are structurally equal exactly when their tokens are equal.
    """
    if value is None:
        return NULL_TOKEN
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return ("boolean", value)
    if isinstance(value, (int, float)):
        return ("number", value)
    if isinstance(value, str):
        return ("string", value)
    if isinstance(value, Mapping):
        items = sorted(
            ((str(key), value_token(item)) for key, item in value.items()),
            key=lambda pair: pair[0],
        )
        return ("object", tuple(items))
    if isinstance(value, (list, tuple)):
        return ("array", tuple(value_token(item) for item in value))
    return ("other", type(value).__name__, repr(value))


def deep_equal(left: Any, right: Any) -> bool:
    """Structural equality with JSON type semantics."""
    return value_token(left) == value_token(right)


def is_collection(value: Any) -> bool:
    """Whether a value is a proper list of elements (strings are not)."""
    return isinstance(value, (list, tuple))


class ValueTally:
    """Frequency count of values with first-seen ordering.

    Each distinct value (by token) keeps the first instance seen as its
    representative. Ties in count resolve to the value seen first, which
    makes the winner a pure function of the input order.
    """

    def __init__(self) -> None:
        self._counts: Dict[Hashable, int] = {}
        self._representatives: Dict[Hashable, Any] = {}

    def add(self, value: Any) -> None:
        token = value_token(value)
        if token not in self._counts:
            self._counts[token] = 0
            self._representatives[token] = value
        self._counts[token] += 1

    def __len__(self) -> int:
        return len(self._counts)

    def ranked(self) -> List[Tuple[Any, int]]:
        """Values with counts, most frequent first, first-seen among ties."""
        # sorted() is stable, so equal counts keep insertion order
        ordered = sorted(self._counts.items(), key=lambda item: -item[1])
        return [(self._representatives[token], count) for token, count in ordered]

    def most_common(self) -> Optional[Tuple[Any, int]]:
        """The winning value and its count, or None when nothing was added."""
        if not self._counts:
            return None
        winner = max(self._counts, key=self._counts.__getitem__)
        return copy.deepcopy(self._representatives[winner]), self._counts[winner]
