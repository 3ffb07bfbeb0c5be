"""Core domain models for benchmark history."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MetricResult:
    """A single named benchmark measurement.

    Attributes:
        name: Benchmark name (e.g., BenchmarkEncode/small).
        value: The measured value.
        unit: Unit of the value (e.g., ns/op, B/op).
        extra: Free-text annotation from the benchmark output.
        package: Originating package path, empty if unknown.
        procs: Parallelism factor (GOMAXPROCS suffix), 0 if unknown.
    """

    name: str
    value: float
    unit: str
    extra: str = ""
    package: str = ""
    procs: int = 0


@dataclass(frozen=True)
class CommitInfo:
    """Source-control revision a batch was measured against.

    Attributes:
        sha: Commit SHA, never empty for a persisted entry.
        message: Commit message (usually the first line).
        author: Commit author.
        date: Commit date as an RFC 3339 string.
        url: Browsable commit URL.
    """

    sha: str
    message: str = ""
    author: str = ""
    date: str = ""
    url: str = ""


@dataclass(frozen=True)
class RunParameters:
    """Environment a batch was measured under.

    Every field takes part in equality, so an unset toolchain version is
    its own configuration, distinct from any explicit version.
    """

    cpu: str = ""
    goos: str = ""
    goarch: str = ""
    go_version: str = ""
    cgo: bool = False

    def artifact_name(self) -> str:
        """Build a filesystem-safe artifact name for these parameters.

        Example: ``bench-linux-amd64-go1.24.0-cgo1``. Empty parts are skipped.
        """
        parts = ["bench"]
        parts.extend(p for p in (self.goos, self.goarch, self.go_version) if p)
        parts.append(f"cgo{1 if self.cgo else 0}")
        return "-".join(parts)


@dataclass(frozen=True)
class EntryKey:
    """Identity of a logical benchmark run."""

    sha: str
    params: RunParameters


@dataclass(frozen=True)
class Entry:
    """One persisted measurement batch.

    Attributes:
        commit: The commit the batch was measured against.
        timestamp: Epoch milliseconds, used as a sort fallback and for display.
        params: Run parameters identifying the environment.
        benchmarks: Results in display order.
    """

    commit: CommitInfo
    timestamp: int
    params: RunParameters = field(default_factory=RunParameters)
    benchmarks: tuple[MetricResult, ...] = ()

    def entry_key(self) -> EntryKey:
        """Return the (SHA, run parameters) key used for deduplication."""
        return EntryKey(sha=self.commit.sha, params=self.params)


@dataclass(frozen=True)
class Metadata:
    """Repository-level information shown by the dashboard.

    Attributes:
        repo_url: Repository URL for the dashboard header.
        last_update: Epoch milliseconds of the last metadata write.
        module_id: Module or namespace identifier, empty if unknown.
    """

    repo_url: str = ""
    last_update: int = 0
    module_id: str = ""
