from __future__ import annotations

import heapq
import threading

DEFAULT_CAPACITY = 10


class BoundedTopK:
    """Keeps the highest-count distinct words offered so far.

    A word's first accepted count is permanent. Once an entry has been
    evicted, offers at or below its count are dropped without taking the lock.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._heap: list[tuple[int, str]] = []
        self._words: set[str] = set()
        self._threshold = 0
        self._lock = threading.Lock()

    @property
    def threshold(self) -> int:
        return self._threshold

    def offer(self, word: str, count: int):
        if count <= self._threshold:
            return

        with self._lock:
            if word in self._words:
                return
            heapq.heappush(self._heap, (count, word))
            self._words.add(word)

            if len(self._heap) > self.capacity:
                evicted_count, evicted_word = heapq.heappop(self._heap)
                self._words.discard(evicted_word)
                self._threshold = evicted_count

    def merge(self, other: BoundedTopK):
        for word, count in other.snapshot():
            self.offer(word, count)

    def snapshot(self) -> list[tuple[str, int]]:
        with self._lock:
            entries = [(word, count) for count, word in self._heap]
        entries.sort(key=lambda e: -e[1])
        return entries

    def clear(self):
        with self._lock:
            self._heap.clear()
            self._words.clear()
            self._threshold = 0

    def __len__(self) -> int:
        return len(self._heap)
