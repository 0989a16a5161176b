import logging
from typing import Tuple

from .program import BindingIdentifier, Program

logger = logging.getLogger(__name__)


def collect_binding_identifiers(program: Program) -> Tuple[BindingIdentifier, ...]:
    """Snapshot every declaration site of ``program`` in traversal order.

    Use-sites are not part of the snapshot; renaming a declaration rewrites
    them. The tuple is taken before the first rename and never changes.
    """
    identifiers = tuple(program.binding_identifiers())
    logger.debug("collected %d binding identifiers", len(identifiers))
    return identifiers
