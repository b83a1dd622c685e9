from reorder_advisor.store.left_right import LeftRightHashIndex
from reorder_advisor.store.memory import InMemoryJobStore

__all__ = [
    "InMemoryJobStore",
    "LeftRightHashIndex",
]
