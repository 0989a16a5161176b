import threading
import unicodedata
from typing import Dict, FrozenSet, Optional


class Registry:
    """Names committed during one rename pass.

    Maps every original name to the final name chosen for it and remembers
    which final names are taken. Final names are compared in NFKC form, the
    way the parser compares identifiers. Callers hold :attr:`lock` around each
    read-check-commit sequence.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self._renames: Dict[str, str] = {}
        self._taken = set()

    def __contains__(self, original_name: str) -> bool:
        return original_name in self._renames

    def __len__(self) -> int:
        return len(self._renames)

    def get(self, original_name: str) -> Optional[str]:
        return self._renames.get(original_name)

    def is_taken(self, final_name: str) -> bool:
        return unicodedata.normalize("NFKC", final_name) in self._taken

    def add(self, original_name: str, final_name: str) -> None:
        if original_name in self._renames:
            raise ValueError(f"{original_name!r} is already committed as {self._renames[original_name]!r}")
        if self.is_taken(final_name):
            raise ValueError(f"{final_name!r} is already taken")
        self._renames[original_name] = final_name
        self._taken.add(unicodedata.normalize("NFKC", final_name))

    @property
    def renames(self) -> Dict[str, str]:
        return dict(self._renames)

    @property
    def taken(self) -> FrozenSet[str]:
        return frozenset(self._taken)
