"""Release-tag detection and the aggregate release timeline."""

import re
from collections.abc import Iterable, Mapping

from benchstore.core.models import Entry

RELEASES_BRANCH = "releases"

# Optional "v", then MAJOR.MINOR.PATCH; anything after that is a suffix.
_RELEASE_TAG_RE = re.compile(r"^v?\d+\.\d+\.\d+")


def is_release_tag(name: str) -> bool:
    """Return True if ``name`` looks like a semantic-version tag.

    Matches ``v1.2.3``, ``1.2.3`` and suffixed forms such as
    ``v1.2.3-beta.1``. ``v1``, ``v1.0`` and ``release/1.0`` do not match.
    """
    return _RELEASE_TAG_RE.match(name) is not None


def catalog_name_for(name: str, aggregate_branch: str = RELEASES_BRANCH) -> str:
    """Resolve the name that is registered in the catalog for ``name``.

    Release tags register the aggregate branch; everything else registers
    itself.
    """
    # @tra: Core.Releases.CatalogRedirect
    if is_release_tag(name):
        return aggregate_branch
    return name


def record_release_tags(
    tags: Mapping[str, str],
    tag: str,
    entries: Iterable[Entry],
) -> dict[str, str]:
    """Return a copy of ``tags`` with every entry's SHA mapped to ``tag``.

    Existing mappings for the same SHA are overwritten, so re-tagging a
    commit keeps only the latest tag. Entries without a SHA are skipped.
    """
    # @tra: Core.Releases.RetagOverwrite
    updated = dict(tags)
    for entry in entries:
        if entry.commit.sha:
            updated[entry.commit.sha] = tag
    return updated
