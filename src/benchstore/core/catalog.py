"""Pure operations on the branch catalog.

The catalog is passed in and returned as a value; callers own the I/O.
"""

from collections.abc import Sequence

from benchstore.core.releases import RELEASES_BRANCH, catalog_name_for


def sort_catalog(
    names: Sequence[str], aggregate_branch: str = RELEASES_BRANCH
) -> list[str]:
    """Sort branch names with the aggregate branch pinned first.

    Remaining names are ordered by code point, so the comparison is
    case-sensitive.
    """
    return sorted(names, key=lambda name: (name != aggregate_branch, name))


def ensure(
    catalog: Sequence[str],
    name: str,
    aggregate_branch: str = RELEASES_BRANCH,
) -> tuple[list[str], bool]:
    """Register a branch name in the catalog.

    Release tags are redirected to the aggregate branch before lookup, so a
    tag name never appears in the catalog itself.

    Args:
        catalog: Current catalog contents.
        name: Branch or tag name to register.
        aggregate_branch: Name of the synthetic release timeline.

    Returns:
        Tuple of (new catalog, was_added). When the resolved name is already
        present the catalog is returned unchanged and was_added is False.
    """
    resolved = catalog_name_for(name, aggregate_branch)
    if resolved in catalog:
        return list(catalog), False
    # @tra: Core.Catalog.SortedInsert
    return sort_catalog([*catalog, resolved], aggregate_branch), True
