"""
Error types for the sync system.

Document-level errors are caught by the sync engine and reported per
document; only ContentSourceError aborts a whole pass.
"""

from typing import Optional


class SyncError(Exception):
    """Base class for sync errors."""


class DocumentValidationError(SyncError):
    """A document's frontmatter does not match the blog post schema."""
    
    def __init__(self, path: str, issues: list):
        self.path = path
        self.issues = issues
        summary = "; ".join(str(issue) for issue in issues) or "invalid frontmatter"
        super().__init__(f"Validation failed for {path}: {summary}")


class PublishError(SyncError):
    """The PDS rejected a record or could not be reached."""
    
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.path = path
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class InvalidDateError(SyncError):
    """A frontmatter date is not an ISO-8601 date."""


class KeyDerivationError(SyncError):
    """A publish date cannot be turned into a record key."""


class ContentSourceError(SyncError):
    """The content directory cannot be enumerated or read."""
