"""Exceptions raised by the search and export pipeline."""


class HostFinderError(Exception):
    """Base class for every failure surfaced to the user."""


class SearchValidationError(HostFinderError):
    """The search form is incomplete; no request was sent."""


class SearchError(HostFinderError):
    """The request failed in transport or the service reported a failure."""


class ExportError(HostFinderError):
    """Nothing is available to export."""
