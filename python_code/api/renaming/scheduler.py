import asyncio
import logging
import math
from typing import Callable, Dict, Optional, Sequence

from .coordinator import RenameCoordinator
from .oracle import Oracle, ask_oracle
from .program import BindingIdentifier

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]
ContextBuilder = Callable[[BindingIdentifier], str]


def plan_batch_size(total: int, parallel: bool, max_batch: int, parallelism: int) -> int:
    """Batch size for ``total`` identifiers; 1 means strictly sequential."""
    if not parallel:
        return 1
    return max(1, min(max_batch, math.ceil(total / parallelism)))


class Scheduler:
    """Drives the identifier snapshot through the oracle and the coordinator.

    Identifiers are processed in contiguous batches, one batch after another.
    Inside a batch every oracle call runs concurrently, one call per original
    name that is not committed yet; commits and renames are then applied in
    snapshot order, so the result does not depend on which call returns first.
    """

    def __init__(
        self,
        coordinator: RenameCoordinator,
        oracle: Oracle,
        context_builder: ContextBuilder,
        batch_size: int = 1,
        on_progress: Optional[ProgressCallback] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.coordinator = coordinator
        self.oracle = oracle
        self.context_builder = context_builder
        self.batch_size = batch_size
        self.on_progress = on_progress

    async def run(self, identifiers: Sequence[BindingIdentifier]) -> None:
        total = len(identifiers)
        processed = 0
        for start in range(0, total, self.batch_size):
            batch = identifiers[start:start + self.batch_size]
            await self._run_batch(batch)
            processed += len(batch)
            if self.on_progress is not None:
                self.on_progress(processed / total)

    async def _run_batch(self, batch: Sequence[BindingIdentifier]) -> None:
        requests: Dict[str, asyncio.Task] = {}
        for identifier in batch:
            if identifier.name in requests or not self.coordinator.needs_oracle(identifier.name):
                continue
            surrounding_code = self.context_builder(identifier)
            requests[identifier.name] = asyncio.ensure_future(
                ask_oracle(self.oracle, identifier.name, surrounding_code)
            )
        if requests:
            try:
                await asyncio.gather(*requests.values())
            except BaseException:
                for request in requests.values():
                    request.cancel()
                await asyncio.gather(*requests.values(), return_exceptions=True)
                raise

        for identifier in batch:
            request = requests.get(identifier.name)
            proposed = request.result() if request is not None else None
            final_name = self.coordinator.commit(identifier.name, proposed)
            self.coordinator.apply(identifier, final_name)
