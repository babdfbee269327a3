from __future__ import annotations

from typing import Iterable, List

from mindvault.core.models import Resource, ResourceType
from mindvault.core.types import ALL, TypeFilter


def filter_resources(
    resources: Iterable[Resource],
    type_filter: TypeFilter = ALL,
    search_query: str = "",
) -> List[Resource]:
    """Return resources matching both the type selector and the search text.

    ``search_query`` is a case-insensitive substring of the title or of any
    tag; an empty query matches everything. Input order is kept.
    """

    wanted = None if type_filter in (None, ALL) else ResourceType(type_filter)
    needle = (search_query or "").lower()

    def _matches(resource: Resource) -> bool:
        if wanted is not None and resource.type != wanted:
            return False
        if not needle:
            return True
        return needle in resource.title.lower() or any(
            needle in tag.lower() for tag in resource.tags
        )

    return [r for r in resources if _matches(r)]


__all__ = ["filter_resources"]
