"""Tests for the union-find structure."""

from __future__ import annotations

from bid_lens.clustering.union_find import UnionFind


class TestUnionFind:
    """Tests for UnionFind class."""

    def test_singletons(self) -> None:
        """Test added keys start in their own sets."""
        uf = UnionFind()
        for key in ("a", "b", "c"):
            uf.add(key)

        assert uf.get_groups() == {"a": ["a"], "b": ["b"], "c": ["c"]}
        assert len(uf) == 3

    def test_add_is_idempotent(self) -> None:
        """Test re-adding a key keeps its set."""
        uf = UnionFind()
        uf.union("a", "b")
        uf.add("b")

        assert uf.connected("a", "b")

    def test_union_and_connected(self) -> None:
        """Test transitive merging."""
        uf = UnionFind()
        uf.union("a", "b")
        uf.union("c", "d")
        uf.union("b", "d")

        assert uf.connected("a", "c")
        assert len(uf.get_groups()) == 1

    def test_find_registers_unknown_key(self) -> None:
        """Test find on an unknown key makes it a singleton."""
        uf = UnionFind()

        assert uf.find("x") == "x"
        assert "x" in uf

    def test_groups_first_seen_order(self) -> None:
        """Test members are listed in registration order."""
        uf = UnionFind()
        for key in ("a", "b", "c", "d"):
            uf.add(key)
        uf.union("d", "b")

        groups = uf.get_groups()

        assert sorted(groups.values()) == [["a"], ["b", "d"], ["c"]]

    def test_path_compression(self) -> None:
        """Test find points every visited key straight at the root."""
        uf = UnionFind()
        for index in range(10):
            uf.union("k0", f"k{index}")
        root = uf.find("k9")

        assert all(uf.find(f"k{index}") == root for index in range(10))

    def test_empty(self) -> None:
        """Test an empty structure has no groups."""
        assert UnionFind().get_groups() == {}

    def test_partition_covers_every_key(self) -> None:
        """Test every key lands in exactly one group."""
        uf = UnionFind()
        keys = [f"m{index}" for index in range(20)]
        for key in keys:
            uf.add(key)
        for index in range(0, 20, 3):
            uf.union(keys[index], keys[(index * 7) % 20])

        members = [key for group in uf.get_groups().values() for key in group]

        assert sorted(members) == sorted(keys)
        assert len(members) == len(set(members))
