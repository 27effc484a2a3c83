from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    DOMESTIC = "Domestic"
    INTERNATIONAL = "International"


class Currency(str, Enum):
    INR = "INR"
    USD = "USD"
    EUR = "EUR"
    POUND = "POUND"


class ColumnMap(BaseModel):
    """Column positions of the semantic fields for one header block."""

    date: Optional[int] = None
    description: Optional[int] = None
    debit: Set[int] = Field(default_factory=set)
    credit: Set[int] = Field(default_factory=set)
    transaction_type: Set[int] = Field(default_factory=set)
    card_name: Set[int] = Field(default_factory=set)
    currency: Optional[int] = None
    location: Optional[int] = None


class NormalizedRow(BaseModel):
    date: str
    description: str = ""
    debit: Optional[Decimal] = None
    credit: Optional[Decimal] = None
    currency: Currency
    card_name: str
    transaction_type: TransactionType
    location: str = ""


class StandardizationResult(BaseModel):
    rows: List[NormalizedRow] = Field(default_factory=list)
    filename: str


class StandardizeResponse(BaseModel):
    filename: str
    count: int = 0
    rows: List[NormalizedRow] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
