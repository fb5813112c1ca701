from unialias.core.errors import (
    DatasetError,
    DuplicateAlias,
    InternalConsistency,
    InvalidAlias,
    NotFound,
    TrieError,
)
from unialias.core.trie import ROOT, NodeKind, Trie, TrieNode
from unialias.core.alias_index import AliasIndex
