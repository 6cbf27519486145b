from __future__ import annotations


class BlogBuildError(Exception):
    """Base class for errors reported to the operator by the CLI."""


class FormatError(BlogBuildError, ValueError):
    """An article (or the article set) is malformed."""


class NotFoundError(BlogBuildError, LookupError):
    """A slug has no markdown source or no generated module."""
