import keyword
import logging
import unicodedata
from typing import AbstractSet, Optional

from .program import BindingIdentifier
from .registry import Registry

logger = logging.getLogger(__name__)

ESCAPE_PREFIX = "_"


def is_valid_identifier(name: str) -> bool:
    if not name.isidentifier():
        return False
    # the parser normalises identifiers, so a fullwidth `None` is still `None`
    return not keyword.iskeyword(unicodedata.normalize("NFKC", name))


def escape_identifier(name: str, prefix: str = ESCAPE_PREFIX) -> str:
    """Turn ``name`` into a valid identifier by prefixing it.

    ``123abc`` becomes ``_123abc`` and ``class`` becomes ``_class``. Names that
    stay invalid after the prefix have every character that cannot continue an
    identifier replaced by ``_``.
    """
    if is_valid_identifier(name):
        return name
    escaped = prefix + name
    if is_valid_identifier(escaped):
        return escaped
    escaped = prefix + "".join(char if ("_" + char).isidentifier() else "_" for char in name)
    if not is_valid_identifier(escaped):
        raise ValueError(f"cannot escape {name!r} with prefix {prefix!r}")
    return escaped


class RenameCoordinator:
    """Commits final names for original names.

    ``reserved`` holds names that stay in the program without being renamed,
    such as builtins and pinned bindings; no final name may shadow one.
    """

    def __init__(self, registry: Registry, prefix: str = ESCAPE_PREFIX, reserved: AbstractSet[str] = frozenset()):
        self.registry = registry
        self.prefix = prefix
        self.reserved = frozenset(unicodedata.normalize("NFKC", name) for name in reserved)

    def _is_free(self, name: str) -> bool:
        return not self.registry.is_taken(name) and unicodedata.normalize("NFKC", name) not in self.reserved

    def needs_oracle(self, original_name: str) -> bool:
        return original_name not in self.registry

    def commit(self, original_name: str, proposed_name: Optional[str]) -> str:
        """Fix the final name of ``original_name``; the first commit wins.

        ``proposed_name`` may be ``None`` only when ``original_name`` is
        already committed.
        """
        with self.registry.lock:
            committed = self.registry.get(original_name)
            if committed is not None:
                return committed
            if proposed_name is None:
                raise ValueError(f"no proposal for uncommitted name {original_name!r}")
            candidate = escape_identifier(proposed_name, self.prefix)
            while not self._is_free(candidate):
                candidate = self.prefix + candidate
            self.registry.add(original_name, candidate)
        if candidate != proposed_name:
            logger.warning("oracle proposed %r for %r, using %r", proposed_name, original_name, candidate)
        else:
            logger.debug("renaming %r to %r", original_name, candidate)
        return candidate

    def apply(self, identifier: BindingIdentifier, final_name: str) -> None:
        identifier.scope.rename(identifier.name, final_name)
