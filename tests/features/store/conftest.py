"""BDD step definitions for branch history and release tag features."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, then, when

from benchstore.adapters.storage import open_store
from benchstore.core.config import StoreConfig
from benchstore.core.store import EntryStore
from tests.factories import build_entry


@dataclass
class StoreScenarioContext:
    """Shared state between steps in a store scenario."""

    root: Path
    retention_limit: int = 0
    appended: list[str] = field(default_factory=list)

    def store(self) -> EntryStore:
        return open_store(
            StoreConfig(root=self.root, retention_limit=self.retention_limit)
        )


@pytest.fixture
def ctx(tmp_path: Path) -> StoreScenarioContext:
    """Fresh scenario context for each test."""
    return StoreScenarioContext(root=tmp_path / "bench")


def _split(names: str) -> list[str]:
    return [name for name in names.split(",") if name]


# === Given ===


@given("an empty benchmark store")
def step_empty_store(ctx: StoreScenarioContext) -> None:
    assert not ctx.root.exists()


@given(parsers.parse("a retention limit of {limit:d}"))
def step_retention(ctx: StoreScenarioContext, limit: int) -> None:
    ctx.retention_limit = limit


# === When ===


@when(
    parsers.parse(
        'commit "{sha}" dated "{date}" with value {value:g} is appended to "{branch}"'
    )
)
def step_append(
    ctx: StoreScenarioContext, sha: str, date: str, value: float, branch: str
) -> None:
    # A fresh store per step exercises the full load/store cycle on disk.
    ctx.store().append_entry(branch, build_entry(sha, date=date, value=value))
    ctx.appended.append(sha)


# === Then ===


@then(parsers.parse('the history of "{branch}" lists commits "{shas}"'))
def step_history(ctx: StoreScenarioContext, branch: str, shas: str) -> None:
    history = ctx.store().read_branch_history(branch)
    assert [e.commit.sha for e in history] == _split(shas)


@then(parsers.parse('commit "{sha}" on "{branch}" has value {value:g}'))
def step_value(ctx: StoreScenarioContext, sha: str, branch: str, value: float) -> None:
    history = ctx.store().read_branch_history(branch)
    matching = [e for e in history if e.commit.sha == sha]
    assert len(matching) == 1
    assert matching[0].benchmarks[0].value == value


@then(parsers.parse('the catalog is "{names}"'))
def step_catalog(ctx: StoreScenarioContext, names: str) -> None:
    assert ctx.store().read_catalog() == _split(names)


@then(parsers.parse('commit "{sha}" is mapped to tag "{tag}"'))
def step_tag_mapping(ctx: StoreScenarioContext, sha: str, tag: str) -> None:
    assert ctx.store().read_release_tags()[sha] == tag


@then("no commits are mapped to tags")
def step_no_tags(ctx: StoreScenarioContext) -> None:
    assert ctx.store().read_release_tags() == {}


@then(parsers.parse('the file "{relative}" exists'))
def step_file_exists(ctx: StoreScenarioContext, relative: str) -> None:
    assert (ctx.root / relative).is_file()
