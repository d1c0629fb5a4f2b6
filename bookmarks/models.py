"""
bookmarks/models.py -- Domain dataclass for saved bookmarks.

Pure data container with zero logic. Ownership scoping lives in
bookmarks/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Bookmark:
    """A link saved by one account.

    owner_id is the id of the account that created it; every store query is
    filtered on it. id is None before the record is written to the database.
    """

    owner_id: int
    title: str
    link: str
    description: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""
