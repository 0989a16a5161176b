import asyncio
import logging
from functools import partial
from typing import Optional

from .collector import collect_binding_identifiers
from .config import RenameConfig
from .context_window import scope_to_string
from .coordinator import RenameCoordinator
from .oracle import Oracle
from .program import parse, render
from .registry import Registry
from .scheduler import ProgressCallback, Scheduler, plan_batch_size

logger = logging.getLogger(__name__)


async def visit_all_identifiers(
    code: str,
    oracle: Oracle,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[RenameConfig] = None,
    registry: Optional[Registry] = None,
) -> str:
    """Rename every binding identifier of ``code`` with names chosen by ``oracle``.

    ``oracle`` receives the current name and a bounded excerpt of the code
    around it and returns the new name. Raises :class:`ParseError`,
    :class:`OracleError` or :class:`GenerationError`; on failure no code is
    returned. Pass a ``registry`` to inspect the committed names afterwards.
    """
    config = config or RenameConfig()
    registry = registry if registry is not None else Registry()

    program = parse(code)
    identifiers = collect_binding_identifiers(program)
    batch_size = plan_batch_size(len(identifiers), config.parallel, config.max_batch, config.parallelism)
    logger.info(
        "renaming %d binding identifiers (batch size %d)", len(identifiers), batch_size
    )

    scheduler = Scheduler(
        RenameCoordinator(registry, reserved=program.reserved_names),
        oracle,
        partial(scope_to_string, window=config.context_window),
        batch_size=batch_size,
        on_progress=on_progress,
    )
    await scheduler.run(identifiers)

    renamed = render(program)
    logger.info("renamed %d distinct names", len(registry))
    return renamed


def rename_identifiers(
    code: str,
    oracle: Oracle,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[RenameConfig] = None,
    registry: Optional[Registry] = None,
) -> str:
    """Blocking wrapper around :func:`visit_all_identifiers`."""
    return asyncio.run(visit_all_identifiers(code, oracle, on_progress, config, registry))
