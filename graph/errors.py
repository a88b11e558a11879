"""Error taxonomy for the social network."""

from __future__ import annotations


class SocialNetworkError(Exception):
    """Base class for every error raised by this project."""


class MissingBffError(SocialNetworkError, ValueError):
    """A person was about to be committed without a best friend."""

    def __init__(self, principal: str) -> None:
        super().__init__(f"Cannot commit '{principal}' without a bff.")
        self.principal = principal


class StoreError(SocialNetworkError):
    """The store could not be reached, read or written."""


class TableNotFoundError(StoreError):
    def __init__(self, table: str) -> None:
        super().__init__(f"Table '{table}' does not exist; provision it before starting.")
        self.table = table


class ColumnFamilyNotFoundError(StoreError):
    def __init__(self, table: str, family: str) -> None:
        super().__init__(f"Table '{table}' has no column family '{family}'.")
        self.table = table
        self.family = family


class InputClosedError(SocialNetworkError):
    """The operator input stream ended while a question was pending."""
