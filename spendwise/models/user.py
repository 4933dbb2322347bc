"""
User Model.

The authenticated identity every storage call is scoped to.  Only ``id``
is used by the repositories; the rest is carried for the application.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Represents the signed-in Supabase user."""

    id: str  # Supabase UUID
    email: Optional[str] = None

    model_config = {"from_attributes": True}
