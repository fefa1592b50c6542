import threading
from typing import Iterable, List, Optional


class JobQueue:
    """Pending input paths shared by all workers.

    pop() removes one entry under the lock, so no two workers ever receive the
    same entry. Order is not part of the contract.
    """

    def __init__(self, paths: Iterable[str] = ()):
        self._items: List[str] = list(paths)
        self._lock = threading.Lock()

    def pop(self) -> Optional[str]:
        with self._lock:
            if not self._items:
                return None
            return self._items.pop()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
