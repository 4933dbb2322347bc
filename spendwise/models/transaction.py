"""
Transaction Model.

A single income or expense entry.  ``date`` holds either a civil date or
an instant; instants are kept as given and reduced to a calendar day only
when the repository encodes them, in the repository's storage zone.
Transactions read back from storage always carry a plain ``date``.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, field_validator

from spendwise.models.enums import TransactionType


class Transaction(BaseModel):
    """Represents a financial transaction record.

    ``id`` is ``None`` until the backend assigns one on insert.
    ``amount`` is signed; ``type`` carries the income/expense direction
    independently of the sign.
    """

    id: Optional[str] = None
    # datetime first: a datetime is also a date
    date: Union[dt.datetime, dt.date]
    category: str
    subcategory: Optional[str] = None
    amount: Decimal
    description: str = ""
    type: TransactionType

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls: type[Transaction], v: object) -> object:
        # bigint primary keys come back as ints
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls: type[Transaction], v: object) -> object:
        return v or ""

    model_config = {"from_attributes": True}
