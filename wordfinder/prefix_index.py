from __future__ import annotations


class PrefixNode:
    __slots__ = ("children", "count")

    def __init__(self):
        self.children: dict[str, PrefixNode] = {}
        self.count: int = 0


class PrefixIndex:
    """Trie whose nodes count how many inserted sequences pass through them.

    Inserting every suffix of every row and column makes a node's count equal
    to the number of grid positions where its path starts a contiguous run.
    """

    def __init__(self):
        self.root = PrefixNode()
        self._nodes = 1

    def add(self, sequence: str):
        node = self.root
        for ch in sequence:
            child = node.children.get(ch)
            if child is None:
                child = PrefixNode()
                node.children[ch] = child
                self._nodes += 1
            node = child
            node.count += 1

    def add_suffixes(self, sequence: str):
        for start in range(len(sequence)):
            self.add(sequence[start:])

    def count_with_prefix(self, query: str) -> int:
        node = self.root
        for ch in query:
            node = node.children.get(ch)
            if node is None:
                return 0
        return node.count

    @property
    def node_count(self) -> int:
        return self._nodes
