"""JSON encoding of entries, branch logs and metadata.

The document shapes are read by the dashboard, so key names and the
omit-empty rules must stay stable.
"""

import json
from collections.abc import Iterable
from typing import Any

from benchstore.core.exceptions import DecodeError, EncodeError
from benchstore.core.models import (
    CommitInfo,
    Entry,
    Metadata,
    MetricResult,
    RunParameters,
)

_INVALID_FILENAME_CHARS = str.maketrans({c: "_" for c in '/\\:*?"<>|'})


def sanitize_branch_name(branch: str) -> str:
    """Replace characters that are unsafe in file names with underscores."""
    return branch.translate(_INVALID_FILENAME_CHARS)


def branch_file_name(branch: str) -> str:
    """Return the data file name (without directory) for a branch."""
    return sanitize_branch_name(branch) + ".json"


# --- Encoding ---


def encode_result(result: MetricResult) -> dict[str, Any]:
    obj: dict[str, Any] = {
        "name": result.name,
        "value": result.value,
        "unit": result.unit,
    }
    if result.extra:
        obj["extra"] = result.extra
    if result.package:
        obj["package"] = result.package
    if result.procs:
        obj["procs"] = result.procs
    return obj


def encode_params(params: RunParameters) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    if params.cpu:
        obj["cpu"] = params.cpu
    if params.goos:
        obj["goos"] = params.goos
    if params.goarch:
        obj["goarch"] = params.goarch
    if params.go_version:
        obj["goVersion"] = params.go_version
    obj["cgo"] = params.cgo
    return obj


def encode_entry(entry: Entry) -> dict[str, Any]:
    """Encode an entry to a JSON-compatible dict.

    Args:
        entry: The entry to encode.

    Returns:
        Dict with ``commit``, ``date``, ``params`` and ``benchmarks`` keys.
    """
    return {
        "commit": {
            "sha": entry.commit.sha,
            "message": entry.commit.message,
            "author": entry.commit.author,
            "date": entry.commit.date,
            "url": entry.commit.url,
        },
        "date": entry.timestamp,
        "params": encode_params(entry.params),
        "benchmarks": [encode_result(r) for r in entry.benchmarks],
    }


def encode_entries(entries: Iterable[Entry]) -> list[dict[str, Any]]:
    """Encode a branch log to a JSON-compatible list."""
    return [encode_entry(entry) for entry in entries]


def encode_metadata(metadata: Metadata) -> dict[str, Any]:
    obj: dict[str, Any] = {
        "repoUrl": metadata.repo_url,
        "lastUpdate": metadata.last_update,
    }
    if metadata.module_id:
        obj["moduleId"] = metadata.module_id
    return obj


def dumps(obj: Any, indent: int = 2) -> str:
    """Serialize a document for storage, with a trailing newline.

    Raises:
        EncodeError: If the document holds NaN or an infinity.
    """
    try:
        text = json.dumps(obj, indent=indent, ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        raise EncodeError(str(exc)) from exc
    return text + "\n"


# --- Decoding ---


def loads(text: str | bytes, source: str) -> Any:
    """Parse a JSON document, raising DecodeError on malformed input.

    Args:
        text: Raw document contents.
        source: Path or label used in the error message.
    """

    def reject_constant(name: str) -> Any:
        raise DecodeError(source, f"non-finite number {name} is not valid JSON")

    try:
        return json.loads(text, parse_constant=reject_constant)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(source, str(exc)) from exc


def _expect(value: Any, kind: type | tuple[type, ...], source: str, what: str) -> Any:
    # bool is an int subclass; it is never a valid number here
    if isinstance(value, bool) and bool not in (
        kind if isinstance(kind, tuple) else (kind,)
    ):
        raise DecodeError(source, f"{what}: expected {_kind_name(kind)}, got bool")
    if not isinstance(value, kind):
        raise DecodeError(
            source, f"{what}: expected {_kind_name(kind)}, got {type(value).__name__}"
        )
    return value


def _kind_name(kind: type | tuple[type, ...]) -> str:
    if isinstance(kind, tuple):
        return " or ".join(k.__name__ for k in kind)
    return kind.__name__


def _optional(
    obj: dict[str, Any],
    key: str,
    kind: type | tuple[type, ...],
    default: Any,
    source: str,
    what: str,
) -> Any:
    if key not in obj or obj[key] is None:
        return default
    return _expect(obj[key], kind, source, f"{what}.{key}")


def decode_result(obj: Any, source: str, what: str = "benchmark") -> MetricResult:
    _expect(obj, dict, source, what)
    value = _expect(obj.get("value"), (int, float), source, f"{what}.value")
    return MetricResult(
        name=_expect(obj.get("name"), str, source, f"{what}.name"),
        value=float(value),
        unit=_optional(obj, "unit", str, "", source, what),
        extra=_optional(obj, "extra", str, "", source, what),
        package=_optional(obj, "package", str, "", source, what),
        procs=_optional(obj, "procs", int, 0, source, what),
    )


def decode_params(obj: Any, source: str, what: str = "params") -> RunParameters:
    if obj is None:
        return RunParameters()
    _expect(obj, dict, source, what)
    return RunParameters(
        cpu=_optional(obj, "cpu", str, "", source, what),
        goos=_optional(obj, "goos", str, "", source, what),
        goarch=_optional(obj, "goarch", str, "", source, what),
        go_version=_optional(obj, "goVersion", str, "", source, what),
        cgo=_optional(obj, "cgo", bool, False, source, what),
    )


def decode_commit(obj: Any, source: str, what: str = "commit") -> CommitInfo:
    _expect(obj, dict, source, what)
    return CommitInfo(
        sha=_optional(obj, "sha", str, "", source, what),
        message=_optional(obj, "message", str, "", source, what),
        author=_optional(obj, "author", str, "", source, what),
        date=_optional(obj, "date", str, "", source, what),
        url=_optional(obj, "url", str, "", source, what),
    )


def decode_entry(obj: Any, source: str = "entry", what: str = "entry") -> Entry:
    """Decode one entry document.

    Missing optional keys fall back to empty values.

    Raises:
        DecodeError: If the document is not the expected shape.
    """
    _expect(obj, dict, source, what)
    benchmarks = _optional(obj, "benchmarks", list, [], source, what)
    return Entry(
        commit=decode_commit(obj.get("commit", {}), source, f"{what}.commit"),
        timestamp=int(_optional(obj, "date", (int, float), 0, source, what)),
        params=decode_params(obj.get("params"), source, f"{what}.params"),
        benchmarks=tuple(
            decode_result(item, source, f"{what}.benchmarks[{i}]")
            for i, item in enumerate(benchmarks)
        ),
    )


def decode_entries(obj: Any, source: str = "branch data") -> list[Entry]:
    """Decode a branch log document (a JSON array of entries)."""
    if obj is None:
        return []
    _expect(obj, list, source, "branch data")
    return [decode_entry(item, source, f"entry[{i}]") for i, item in enumerate(obj)]


def decode_catalog(obj: Any, source: str = "branches") -> list[str]:
    """Decode the catalog document (a JSON array of branch names)."""
    if obj is None:
        return []
    _expect(obj, list, source, "branches")
    return [_expect(name, str, source, f"branches[{i}]") for i, name in enumerate(obj)]


def decode_release_tags(obj: Any, source: str = "release tags") -> dict[str, str]:
    """Decode the release tag map (a JSON object of SHA to tag name)."""
    if obj is None:
        return {}
    _expect(obj, dict, source, "release tags")
    return {
        sha: _expect(tag, str, source, f"release tags[{sha!r}]")
        for sha, tag in obj.items()
    }


def decode_metadata(obj: Any, source: str = "metadata") -> Metadata:
    _expect(obj, dict, source, "metadata")
    return Metadata(
        repo_url=_optional(obj, "repoUrl", str, "", source, "metadata"),
        last_update=_optional(obj, "lastUpdate", int, 0, source, "metadata"),
        module_id=_optional(obj, "moduleId", str, "", source, "metadata"),
    )
