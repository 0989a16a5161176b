from .config import RenameConfig
from .engine import rename_identifiers, visit_all_identifiers
from .errors import GenerationError, OracleError, ParseError, RenameError
from .registry import Registry

__all__ = [
    "RenameConfig",
    "Registry",
    "rename_identifiers",
    "visit_all_identifiers",
    "RenameError",
    "ParseError",
    "GenerationError",
    "OracleError",
]
