"""Disjoint-set structure over email IDs."""

from __future__ import annotations


class UnionFind:
    """Union-find with path compression and union by rank.

    Keys are registered on first use, so ``find`` on an unknown key makes it
    a singleton set. Groups are reported in first-registration order.

    Example:
        uf = UnionFind()
        uf.union("a", "b")
        uf.get_groups()  # {"a": ["a", "b"]}
    """

    def __init__(self) -> None:
        self._parent: dict[str, str] = {}
        self._rank: dict[str, int] = {}

    def add(self, key: str) -> None:
        """Register a key as its own set if it is not known yet."""
        if key not in self._parent:
            self._parent[key] = key
            self._rank[key] = 0

    def find(self, key: str) -> str:
        """Return the root of the set containing ``key``."""
        self.add(key)

        root = key
        while self._parent[root] != root:
            root = self._parent[root]

        # Path compression
        while self._parent[key] != root:
            self._parent[key], key = root, self._parent[key]

        return root

    def union(self, first: str, second: str) -> None:
        """Merge the sets containing the two keys."""
        root_first = self.find(first)
        root_second = self.find(second)

        if root_first == root_second:
            return

        rank_first = self._rank[root_first]
        rank_second = self._rank[root_second]

        if rank_first < rank_second:
            self._parent[root_first] = root_second
        elif rank_first > rank_second:
            self._parent[root_second] = root_first
        else:
            self._parent[root_second] = root_first
            self._rank[root_first] = rank_first + 1

    def connected(self, first: str, second: str) -> bool:
        """Check whether two keys are in the same set."""
        return self.find(first) == self.find(second)

    def get_groups(self) -> dict[str, list[str]]:
        """Return the partition as root -> member keys."""
        groups: dict[str, list[str]] = {}
        for key in list(self._parent):
            groups.setdefault(self.find(key), []).append(key)
        return groups

    def __len__(self) -> int:
        return len(self._parent)

    def __contains__(self, key: object) -> bool:
        return key in self._parent
