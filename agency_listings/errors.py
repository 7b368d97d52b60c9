# agency_listings/errors.py
"""Exception types raised by the listing pipeline and the curated store."""


class ListingsError(Exception):
    """Base class for listing pipeline errors."""


class OverrideLookupFailed(ListingsError):
    """The curated store could not be read.

    Only ever recorded on a `CuratedLookup`; the resolver falls back to the
    bulk store instead of raising it.
    """


class BulkLookupFailed(ListingsError):
    """The bulk agency store could not be queried. There is no further fallback."""


class RankConflict(ListingsError):
    """A curated row already occupies (service_slug, city_slug, rank)."""

    def __init__(self, service_slug: str, city_slug: str, rank: int):
        self.service_slug = service_slug
        self.city_slug = city_slug
        self.rank = rank
        super().__init__(
            f"An agency with rank {rank} already exists on {service_slug}/{city_slug}. "
            "Change the rank first."
        )
