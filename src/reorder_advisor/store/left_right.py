from collections.abc import Iterable, Iterator


class LeftRightHashIndex:
    """A set of (left, right) hash pairs indexed from both sides.

    Lookups by either side cost the size of the matching set, not of the whole index.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._rights_by_left: dict[str, set[str]] = {}
        self._lefts_by_right: dict[str, set[str]] = {}
        for left, right in pairs:
            self.upsert(left, right)

    def __len__(self) -> int:
        return sum(len(rights) for rights in self._rights_by_left.values())

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        left, right = pair
        return right in self._rights_by_left.get(left, ())

    def __iter__(self) -> Iterator[tuple[str, str]]:
        for left, rights in self._rights_by_left.items():
            for right in rights:
                yield left, right

    def upsert(self, left: str, right: str) -> None:
        self._rights_by_left.setdefault(left, set()).add(right)
        self._lefts_by_right.setdefault(right, set()).add(left)

    def delete(self, left: str, right: str) -> None:
        _discard(self._rights_by_left, left, right)
        _discard(self._lefts_by_right, right, left)

    def delete_left(self, left: str) -> None:
        for right in self._rights_by_left.pop(left, set()):
            _discard(self._lefts_by_right, right, left)

    def delete_right(self, right: str) -> None:
        for left in self._lefts_by_right.pop(right, set()):
            _discard(self._rights_by_left, left, right)

    def get_right_hashes_by_left_hash(self, left: str) -> set[str]:
        return set(self._rights_by_left.get(left, ()))

    def get_left_hashes_by_right_hash(self, right: str) -> set[str]:
        return set(self._lefts_by_right.get(right, ()))

    def get_left_hashes(self) -> set[str]:
        return set(self._rights_by_left)

    def get_right_hashes(self) -> set[str]:
        return set(self._lefts_by_right)

    def build_by_right_hashes(self, rights: Iterable[str]) -> "LeftRightHashIndex":
        """Return a new index holding only the pairs whose right hash is in ``rights``."""
        return LeftRightHashIndex(
            (left, right) for right in set(rights) for left in self._lefts_by_right.get(right, ())
        )


def _discard(index: dict[str, set[str]], key: str, value: str) -> None:
    values = index.get(key)
    if values is None:
        return
    values.discard(value)
    if not values:
        del index[key]
