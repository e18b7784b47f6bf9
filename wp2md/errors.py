"""Exception types raised while converting a post."""

from __future__ import annotations


class ConversionError(Exception):
    """A post could not be converted.

    The CLI catches this per post and continues with the next one.
    """

    def __init__(self, message: str, slug: str | None = None):
        super().__init__(message)
        self.slug = slug


class EmbedError(ConversionError):
    """An embed widget is missing the markup it is expected to always carry."""


class FormatterError(ConversionError):
    """The code pretty-printer rejected a block. Never fatal for the post."""

    def __init__(self, message: str, syntax: str | None = None):
        super().__init__(message)
        self.syntax = syntax
