"""
Budget Model.

A spending limit for one category in one month.  A user holds at most
one budget per (category, month).
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class Budget(BaseModel):
    """Represents a monthly category budget."""

    category: str
    amount: Decimal
    month: str = Field(pattern=r"^\d{4}-(0[1-9]|1[0-2])$")  # YYYY-MM

    model_config = {"from_attributes": True}
