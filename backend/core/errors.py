"""Exceptions raised at the engine's collaborator boundaries.

Data-shape problems never raise: malformed sets coerce to zero and unknown
exercise names resolve to themselves. Only an unavailable collaborator is an
error.
"""


class EngineError(Exception):
    """Base class for engine errors."""
    pass


class CatalogLoadError(EngineError):
    """The catalog source could not be read."""
    pass


class NarrativeUnavailableError(EngineError):
    """The narrative text generator failed or is unreachable."""
    pass
