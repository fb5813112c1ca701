# errors.py - exception types raised by the alias trie and the dataset loader


class TrieError(Exception):
    """Base class for everything the alias trie raises."""


class DuplicateAlias(TrieError):
    """Insertion of an alias that is already stored."""

    def __init__(self, alias: str):
        super().__init__(f"Leaf with same value already exists: {alias!r}")
        self.alias = alias


class NotFound(TrieError):
    """No leaf stores exactly this alias."""

    def __init__(self, alias: str):
        super().__init__(f"No leaf with exact match was found: {alias!r}")
        self.alias = alias


class InvalidAlias(TrieError, ValueError):
    """Alias is empty or is not ASCII."""


class InternalConsistency(TrieError, RuntimeError):
    """A structural invariant of the trie does not hold. Always a bug."""


class DatasetError(Exception):
    """A dataset file could not be read or contains a malformed line."""

    def __init__(self, msg: str, path=None, lineno=None):
        where = ""
        if path is not None:
            where = f"{path}"
            if lineno is not None:
                where += f":{lineno}"
            where += ": "
        super().__init__(where + msg)
        self.path = path
        self.lineno = lineno
