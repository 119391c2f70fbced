"""Exceptions raised by the small-claims backend.

Scoring, rules and graph operations absorb incomplete data instead of raising;
only the persistence layer surfaces failures to the caller.
"""

from __future__ import annotations


class SmallClaimsError(Exception):
    """Base exception for the package."""


class GraphStorageError(SmallClaimsError):
    """A graph document could not be read from or written to its store."""

    def __init__(self, operation: str, claim_id: str, original: Exception | None = None):
        self.operation = operation
        self.claim_id = claim_id
        self.original_exception = original
        message = f"Graph {operation} failed for claim '{claim_id}'"
        if original is not None:
            message += f": {original}"
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "claim_id": self.claim_id,
            "message": str(self),
            "original_exception": str(self.original_exception) if self.original_exception else None,
        }
