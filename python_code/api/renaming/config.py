import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

CONTEXT_WINDOW_SIZE = 200
MAX_BATCH_SIZE = 1000


def default_parallelism() -> int:
    return os.cpu_count() or 1


def _read_int(variable: str, default: int) -> int:
    raw = os.getenv(variable)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{variable} must be an integer, got {raw!r}") from None


def _read_flag(variable: str, default: bool) -> bool:
    raw = os.getenv(variable)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RenameConfig:
    """Tunables of one rename pass.

    ``parallel`` selects batched-parallel scheduling; ``parallelism`` and
    ``max_batch`` only matter when it is set.
    """

    context_window: int = CONTEXT_WINDOW_SIZE
    max_batch: int = MAX_BATCH_SIZE
    parallelism: int = field(default_factory=default_parallelism)
    parallel: bool = False

    def __post_init__(self):
        for option in ("context_window", "max_batch", "parallelism"):
            if getattr(self, option) < 1:
                raise ValueError(f"{option} must be at least 1")

    @classmethod
    def from_env(cls) -> "RenameConfig":
        load_dotenv()
        return cls(
            context_window=_read_int("RENAME_CONTEXT_WINDOW", CONTEXT_WINDOW_SIZE),
            max_batch=_read_int("RENAME_MAX_BATCH", MAX_BATCH_SIZE),
            parallelism=_read_int("RENAME_PARALLELISM", default_parallelism()),
            parallel=_read_flag("RENAME_PARALLEL", False),
        )
