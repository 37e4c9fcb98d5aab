"""Exceptions raised by the job watcher pipeline."""

from __future__ import annotations


class WatcherError(Exception):
    """Base class for pipeline failures."""


class FetchError(WatcherError):
    """The source page could not be retrieved (network error or non-2xx status)."""


class ExtractionAnomaly(WatcherError):
    """A listing container did not yield a usable posting."""


class PersistenceError(WatcherError):
    """The seen-jobs store could not be read or written."""


class NotificationError(WatcherError):
    """The digest email could not be dispatched."""
