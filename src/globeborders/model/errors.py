"""
Error taxonomy of the globe builder.

None of these abort a whole build: malformed rings and triangulation
failures are handled per ring, an unavailable dataset yields an empty globe.
"""


class GlobeBordersError(Exception):
    """Base class for all globeborders errors."""


class MalformedRingError(GlobeBordersError):
    """A ring has fewer than 3 distinct points after closure."""


class TriangulationUnavailableError(GlobeBordersError):
    """The 2D triangulation primitive could not produce valid indices."""


class DatasetUnavailableError(GlobeBordersError):
    """The source feature collection could not be read or parsed."""
