"""Interfaces for the storage collaborators.

Services depend only on these ABCs.  The concrete SQLite and filesystem
adapters live in ``stickerpacks.providers`` and are wired in
``stickerpacks.context.build_context``, so tests can
swap in fakes or mocks without touching business logic.
"""

from stickerpacks.interfaces.blob_provider import IBlobProvider
from stickerpacks.interfaces.submission_provider import ISubmissionProvider
from stickerpacks.interfaces.user_provider import IUserProvider

__all__ = [
    "IBlobProvider",
    "ISubmissionProvider",
    "IUserProvider",
]
