"""Request bodies for the ledger API.

Pydantic handles coercion and range checks; FastAPI turns failures into
422 responses.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class TradeCreate(BaseModel):
    """A new trade.  Leave the sell fields empty while the position is open."""

    scrip_name: str = Field(..., min_length=1, description="Instrument label, e.g. RELIANCE")
    quantity: float = Field(..., gt=0, allow_inf_nan=False, description="Quantity must be positive")
    buy_price: float = Field(..., gt=0, allow_inf_nan=False, description="Buy price must be positive")
    sell_price: Optional[float] = Field(None, gt=0, allow_inf_nan=False, description="Sell price must be positive")
    buy_date: date
    sell_date: Optional[date] = None

    @model_validator(mode="after")
    def check_sell_after_buy(self):
        if self.sell_date is not None and self.sell_date < self.buy_date:
            raise ValueError("sell_date cannot be before buy_date")
        return self


class TradeUpdate(BaseModel):
    """Partial trade edit.  Send ``null`` for a sell field to reopen the position."""

    scrip_name: Optional[str] = Field(None, min_length=1)
    quantity: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    buy_price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    sell_price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    buy_date: Optional[date] = None
    sell_date: Optional[date] = None

    @model_validator(mode="after")
    def check_required_not_null(self):
        for name in ("scrip_name", "quantity", "buy_price", "buy_date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class CapitalUpdate(BaseModel):
    total_capital: float = Field(..., ge=0, allow_inf_nan=False, description="Capital must be a positive number")
