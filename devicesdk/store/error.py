"""Errors raised by a wrapped property store."""

from __future__ import annotations


class StoreError(Exception):
    """An operation of a property store failed; ``source`` is the original error."""

    message = "store error"

    def __init__(self, source: BaseException) -> None:
        super().__init__(self.message)
        self.source = source
        self.__cause__ = source


class StorePropError(StoreError):
    """Could not store a property."""

    message = "could not store property"


class LoadPropError(StoreError):
    """Could not load a property."""

    message = "could not load property"


class DeletePropError(StoreError):
    """Could not delete a property."""

    message = "could not delete property"


class ClearError(StoreError):
    """Could not clear the database."""

    message = "could not clear database"


class LoadAllError(StoreError):
    """Could not load all properties."""

    message = "could not load all properties"