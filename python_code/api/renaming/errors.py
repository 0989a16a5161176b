"""Exceptions raised by a rename pass."""


class RenameError(Exception):
    """Base class for every error that aborts a rename pass."""


class ParseError(RenameError):
    """The input source could not be parsed. Nothing was renamed."""


class GenerationError(RenameError):
    """The renamed program could not be rendered back to source."""


class OracleError(RenameError):
    """The naming oracle failed while proposing a name for ``name``."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"oracle failed for {name!r}: {reason}")
        self.name = name


__all__ = ["RenameError", "ParseError", "GenerationError", "OracleError"]
