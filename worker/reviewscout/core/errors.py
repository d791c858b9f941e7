"""Failure taxonomy for a lookup run.

Only :class:`NotFound` (surfaced by the pipeline as :class:`ResolutionFailed`)
aborts a run; the others are logged where they occur and the run carries on
with whatever data it has.
"""


class ReviewScoutError(RuntimeError):
    """Base class for lookup failures."""


class NotFound(ReviewScoutError):
    """The directory text lookup produced no usable candidate."""


class ResolutionFailed(ReviewScoutError):
    """The pipeline could not resolve the requested entity."""


class DetailUnavailable(ReviewScoutError):
    """The detail lookup failed after a successful text lookup."""


class PageFetchFailed(ReviewScoutError):
    """A single search results page could not be fetched or decoded."""


class ShardEmpty(ReviewScoutError):
    """A site-restricted query was requested for an empty platform shard."""
