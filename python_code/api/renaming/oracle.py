import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Union

from .errors import OracleError

logger = logging.getLogger(__name__)

# (current_name, surrounding_code) -> proposed name, sync or async
Oracle = Callable[[str, str], Union[str, Awaitable[str]]]


def _is_async(oracle: Oracle) -> bool:
    if inspect.iscoroutinefunction(oracle):
        return True
    return inspect.iscoroutinefunction(getattr(oracle, "__call__", None))


async def ask_oracle(oracle: Oracle, name: str, surrounding_code: str) -> str:
    """Ask ``oracle`` for a new name for ``name``.

    Blocking oracles run in a worker thread so calls issued together overlap.
    Any failure is reported as :class:`OracleError`; there is no retry.
    """
    logger.debug("asking oracle to rename %r (%d chars of context)", name, len(surrounding_code))
    try:
        if _is_async(oracle):
            proposed = await oracle(name, surrounding_code)
        else:
            proposed = await asyncio.to_thread(oracle, name, surrounding_code)
            if inspect.isawaitable(proposed):
                proposed = await proposed
    except Exception as exc:
        raise OracleError(name, f"{type(exc).__name__}: {exc}") from exc
    if not isinstance(proposed, str):
        raise OracleError(name, f"expected a string, got {type(proposed).__name__}")
    return proposed
