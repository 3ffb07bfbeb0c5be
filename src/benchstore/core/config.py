"""Entry store configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from benchstore.core.releases import RELEASES_BRANCH

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class StoreConfig:
    """Configuration for an entry store.

    Attributes:
        root: Directory holding branches.json, metadata.json and data/.
        retention_limit: Maximum entries kept per branch log. Zero or a
            negative value keeps every entry.
        aggregate_branch: Name of the synthetic release timeline.
        atomic_writes: Write through a temporary file and rename into place.
        indent: JSON indentation of persisted documents.
    """

    root: Path = Path("benchmarks")
    retention_limit: int = 0
    aggregate_branch: str = RELEASES_BRANCH
    atomic_writes: bool = True
    indent: int = 2

    def __post_init__(self) -> None:
        if not self.aggregate_branch:
            raise ValueError("aggregate_branch must not be empty")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StoreConfig":
        """Build a configuration from BENCHSTORE_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Raises:
            ValueError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        root = env.get("BENCHSTORE_ROOT") or defaults.root
        return cls(
            root=Path(root),
            retention_limit=_parse_int(
                env.get("BENCHSTORE_MAX_ITEMS"), defaults.retention_limit
            ),
            aggregate_branch=env.get("BENCHSTORE_AGGREGATE_BRANCH")
            or defaults.aggregate_branch,
            atomic_writes=_parse_bool(
                env.get("BENCHSTORE_ATOMIC_WRITES"), defaults.atomic_writes
            ),
        )


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(
            f"BENCHSTORE_MAX_ITEMS must be an integer, got {raw!r}"
        ) from None
    if value < 0:
        raise ValueError(f"BENCHSTORE_MAX_ITEMS must be >= 0, got {value}")
    return value


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"BENCHSTORE_ATOMIC_WRITES must be a boolean, got {raw!r}")
