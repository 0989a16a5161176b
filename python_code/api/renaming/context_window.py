from .config import CONTEXT_WINDOW_SIZE
from .program import BindingIdentifier, Scope


def closest_surrounding_scope(identifier: BindingIdentifier) -> Scope:
    """The root scope, or the nearest scope that declares ``identifier``."""
    scope = identifier.scope
    while not scope.is_root and identifier.name not in scope.declared_names():
        scope = scope.parent
    return scope


def scope_to_string(identifier: BindingIdentifier, window: int = CONTEXT_WINDOW_SIZE) -> str:
    """Source excerpt handed to the oracle for ``identifier``.

    Small scopes are shown whole. For the module, a ``window``-sized slice is
    centred on the identifier and clamped at both ends of the file. Large
    nested scopes are cut to their first ``window`` characters, since
    declarations tend to sit near the top of their own scope.
    """
    surrounding = closest_surrounding_scope(identifier)
    code = surrounding.code()
    if len(code) < window:
        return code
    if surrounding.is_root:
        half = window // 2
        start = identifier.start if identifier.start is not None else 0
        end = identifier.end if identifier.end is not None else len(code)
        if end < half:
            return code[:window]
        if start > len(code) - half:
            return code[-window:]
        return code[max(start - half, 0):end + half]
    return code[:window]
