# trie.py
# Compressed prefix tree (radix tree) mapping short ASCII aliases to single characters.
# Every node lives in one append-only list (the arena) and nodes refer to each other
# by index only, so re-parenting during a split is an integer rewrite.
# Node 0 is the root: empty value, internal, its own parent.
# Lookups follow a single branch per level, so a query is O(depth) whatever the size.

from __future__ import annotations
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from unialias.core.errors import (
    DuplicateAlias,
    InternalConsistency,
    InvalidAlias,
    NotFound,
)

ROOT = 0

Match = Tuple[int, int]  # (node index, matched length)
Entry = Tuple[str, str]  # (alias, character)


def encode_alias(alias: str) -> bytes:
    """Validate an alias (non-empty ASCII) and return its bytes."""
    if not isinstance(alias, str):
        raise InvalidAlias(f"Alias must be a string, got {type(alias).__name__}")
    if not alias:
        raise InvalidAlias("Alias string is empty")
    if not alias.isascii():
        raise InvalidAlias(f"Alias string is not ASCII: {alias!r}")
    return alias.encode("ascii")


class NodeKind(Enum):
    INTERNAL = "internal"
    LEAF = "leaf"


class TrieNode:
    """
    A single node in the arena.
    value: ASCII fragment, always starting with the parent's value
    parent: index of the owning node (the root points at itself)
    children: child indices in insertion order, internal nodes only
    data: the stored character, leaves only
    """

    __slots__ = ("value", "parent", "kind", "children", "data")

    def __init__(
        self,
        value: bytes,
        parent: int,
        kind: NodeKind,
        children: Optional[List[int]] = None,
        data: Optional[str] = None,
    ) -> None:
        self.value = value
        self.parent = parent
        self.kind = kind
        self.children = children
        self.data = data

    @classmethod
    def internal(cls, value: bytes, parent: int, children: Optional[List[int]] = None) -> "TrieNode":
        return cls(value, parent, NodeKind.INTERNAL, children=list(children or []))

    @classmethod
    def leaf(cls, value: bytes, parent: int, data: str) -> "TrieNode":
        return cls(value, parent, NodeKind.LEAF, data=data)

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.LEAF

    def value_str(self) -> str:
        return self.value.decode("ascii")

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"<Leaf {self.value_str()!r} parent={self.parent} data={self.data!r}>"
        return f"<Internal {self.value_str()!r} parent={self.parent} children={self.children}>"


class Trie:
    """
    Radix tree of (alias -> character) entries used for alias expansion:
     - find_max_match(): longest stored prefix of what the user typed
     - enumerate_from(): completions below a matched node
     - find_value(): exact alias lookup on selection
    Entries can only be added. A reload builds a fresh Trie instead.
    """

    def __init__(self) -> None:
        self._nodes: List[TrieNode] = [TrieNode.internal(b"", ROOT)]
        self._size = 0

    # arena access -----------------------------------------------------
    def node(self, idx: int) -> TrieNode:
        self._check_index(idx)
        return self._nodes[idx]

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    def value_str(self, idx: int) -> str:
        return self.node(idx).value_str()

    def _check_index(self, idx: int) -> None:
        if not 0 <= idx < len(self._nodes):
            raise IndexError(f"node index out of range: {idx}")

    # longest prefix match ----------------------------------------------
    def find_max_match(self, data: Union[bytes, str]) -> Match:
        """
        Find the best match for `data`: longest match first, then the node
        highest in the tree. The node may be internal or a leaf.
        Returns (node index, matched length). Empty input gives (ROOT, 0).
        """
        if isinstance(data, str):
            if not data.isascii():
                raise InvalidAlias(f"Alias string is not ASCII: {data!r}")
            data = data.encode("ascii")
        if not data:
            return ROOT, 0

        nodes = self._nodes
        n = len(data)
        idx = ROOT
        pos = 0  # next byte of `data` to compare
        while True:
            node = nodes[idx]
            value = node.value
            bound = min(len(value), n)
            while pos < bound and data[pos] == value[pos]:
                pos += 1

            # input exhausted, or mismatch inside this node: nothing deeper can do better
            if pos == n or pos < len(value):
                break
            if node.kind is NodeKind.LEAF:
                break

            nxt = None
            for child in node.children:
                cval = nodes[child].value
                # a child equal to its parent is skipped here, the parent is the better match
                if len(cval) > pos and cval[pos] == data[pos]:
                    nxt = child
                    break
            if nxt is None:
                break
            idx = nxt
            pos += 1
        return idx, pos

    # exact lookup ---------------------------------------------------------
    def find_value(self, alias: str) -> str:
        """
        Return the character stored for exactly `alias`.
        Raises InvalidAlias for empty/non-ASCII input and NotFound when no leaf
        holds this exact alias.
        """
        key = encode_alias(alias)
        idx, mlen = self.find_max_match(key)
        node = self._nodes[idx]
        if mlen != len(key) or len(node.value) != mlen:
            raise NotFound(alias)
        if node.is_leaf:
            return node.data

        # internal node equal to the alias: the entry is its same-length leaf child
        for child in node.children:
            cnode = self._nodes[child]
            if len(cnode.value) == mlen:
                if not cnode.is_leaf:
                    raise InternalConsistency(
                        f"internal node {child} has the same value as its parent {idx}"
                    )
                return cnode.data
        raise NotFound(alias)

    def __contains__(self, alias: str) -> bool:
        try:
            self.find_value(alias)
        except (NotFound, InvalidAlias):
            return False
        return True

    def __len__(self) -> int:
        return self._size

    # insertion -------------------------------------------------------------
    def append_leaf(self, alias: str, data: str) -> None:
        """
        Insert `alias` -> `data`, creating a branch node when needed.
        Raises DuplicateAlias (trie untouched) when the alias already exists.
        """
        key = encode_alias(alias)
        if not isinstance(data, str) or len(data) != 1:
            raise ValueError(f"Value must be a single character, got {data!r}")

        idx, mlen = self.find_max_match(key)
        node = self._nodes[idx]

        if node.kind is NodeKind.INTERNAL:
            if mlen == len(node.value):
                # whole node consumed: new longer alias, or alias equal to this branch point
                if mlen < len(key) or all(
                    len(self._nodes[c].value) > mlen for c in node.children
                ):
                    self._add_leaf(idx, key, data)
                    return
                raise DuplicateAlias(alias)
        elif mlen == len(node.value) and mlen == len(key):
            raise DuplicateAlias(alias)

        self._split(idx, mlen, key, data)

    def _add_leaf(self, parent: int, key: bytes, data: str) -> int:
        leaf_idx = len(self._nodes)
        self._nodes.append(TrieNode.leaf(key, parent, data))
        self._children_of(parent).append(leaf_idx)
        self._size += 1
        return leaf_idx

    def _split(self, idx: int, mlen: int, key: bytes, data: str) -> None:
        """
        Materialise the branch point where `key` diverges from node `idx`:
        a new internal node holding the common prefix takes the place of `idx`
        in its parent, with `idx` and the new leaf as its children.
        """
        node = self._nodes[idx]
        par = node.parent
        siblings = self._children_of(par)

        inter_idx = len(self._nodes)
        self._nodes.append(TrieNode.internal(node.value[:mlen], par, [idx]))
        siblings[siblings.index(idx)] = inter_idx
        node.parent = inter_idx
        self._add_leaf(inter_idx, key, data)

    def _children_of(self, idx: int) -> List[int]:
        node = self._nodes[idx]
        if node.is_leaf:
            raise InternalConsistency(f"leaf node {idx} used as a parent")
        return node.children

    # traversal -----------------------------------------------------------------
    def iter(self, node_idx: int = ROOT) -> Iterator[Tuple[int, int]]:
        """
        Pre-order walk over `node_idx` and all its descendants, yielding
        (node index, depth). The start node comes first at depth 0.
        Single pass; do not insert while iterating.
        """
        self._check_index(node_idx)
        return self._walk(node_idx)

    def _walk(self, start: int) -> Iterator[Tuple[int, int]]:
        nodes = self._nodes
        # explicit stack of child iterators, no recursion
        stack = [iter((start,))]
        while stack:
            idx = next(stack[-1], None)
            if idx is None:
                stack.pop()
                continue
            yield idx, len(stack) - 1
            node = nodes[idx]
            if node.kind is NodeKind.INTERNAL:
                stack.append(iter(node.children))

    def enumerate_from(self, node_idx: int, max_count: int) -> List[Entry]:
        """Collect up to `max_count` (alias, character) leaves under `node_idx`, in walk order."""
        out: List[Entry] = []
        if max_count <= 0:
            return out
        for idx, _depth in self.iter(node_idx):
            node = self._nodes[idx]
            if node.is_leaf:
                out.append((node.value_str(), node.data))
                if len(out) >= max_count:
                    break
        return out

    def entries(self) -> List[Entry]:
        return self.enumerate_from(ROOT, self._size)

    # convenience/debugging -----------------------------------------------------
    def render(self, indent: str = "    ") -> str:
        """Indented dump of the whole tree, leaves suffixed with their character."""
        lines = []
        for idx, depth in self.iter(ROOT):
            node = self._nodes[idx]
            text = node.value_str() if idx != ROOT else "<root>"
            if node.is_leaf:
                text += f"({node.data})"
            lines.append(indent * depth + text)
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()

    def validate(self) -> None:
        """
        Check the structural invariants over the whole arena.
        (Slow: O(N) walk. For tests and debugging, not the keystroke path.)
        Raises InternalConsistency on the first violation.
        """
        nodes = self._nodes
        root = nodes[ROOT]
        if root.value != b"" or root.is_leaf or root.parent != ROOT:
            raise InternalConsistency("root must be an empty internal node parented to itself")

        seen_leaves = set()
        for node in nodes:
            if node.is_leaf:
                if node.value in seen_leaves:
                    raise InternalConsistency(f"duplicate leaf value {node.value!r}")
                seen_leaves.add(node.value)

        reached = set()
        for idx, _depth in self.iter(ROOT):
            if idx in reached:
                raise InternalConsistency(f"node {idx} is listed under more than one parent")
            reached.add(idx)
        if len(reached) != len(nodes):
            raise InternalConsistency(f"{len(nodes) - len(reached)} nodes unreachable from the root")

        for idx, node in enumerate(nodes):
            if idx != ROOT:
                parent = nodes[node.parent]
                if parent.is_leaf or idx not in parent.children:
                    raise InternalConsistency(f"node {idx} is not a child of its parent {node.parent}")
                if not node.value.startswith(parent.value):
                    raise InternalConsistency(f"node {idx} does not extend its parent's value")
                if len(node.value) == len(parent.value) and not node.is_leaf:
                    raise InternalConsistency(f"internal node {idx} has the same value as its parent")

            if not node.is_leaf:
                vlen = len(node.value)
                branch_bytes = set()
                equal = 0
                for child in node.children:
                    cval = nodes[child].value
                    if len(cval) < vlen:
                        raise InternalConsistency(f"node {child} is shorter than its parent {idx}")
                    if len(cval) == vlen:
                        equal += 1
                    elif cval[vlen] in branch_bytes:
                        raise InternalConsistency(f"children of node {idx} share branching byte {cval[vlen]!r}")
                    else:
                        branch_bytes.add(cval[vlen])
                if equal > 1:
                    raise InternalConsistency(f"node {idx} has more than one same-value child")

        if len(seen_leaves) != self._size:
            raise InternalConsistency("leaf count does not match the stored size")
