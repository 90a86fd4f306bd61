from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    Domain record for a TODO row as read back from the store.

    Fields:
    - id: Store-assigned integer identifier (monotonically increasing)
    - subject: Non-empty short text
    - description: Free text, may be empty
    - created_at: Set by the store on insert
    - updated_at: Refreshed by the store on every update
    """

    id: int
    subject: str
    description: str
    created_at: datetime
    updated_at: datetime
