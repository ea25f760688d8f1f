"""Profile update variants, dispatched on `kind`."""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class BuyerUpdate(BaseModel):
    kind: Literal["buyer"] = "buyer"
    display_name: str | None = None
    country: str | None = None


class SellerUpdate(BaseModel):
    kind: Literal["seller"] = "seller"
    company_name: str | None = None
    description: str | None = None
    primary_category_id: str | None = None


class SellerExtendedUpdate(SellerUpdate):
    kind: Literal["seller_extended"] = "seller_extended"
    country: str | None = None
    tax_id: str | None = None


ProfileUpdate = Annotated[
    Union[BuyerUpdate, SellerUpdate, SellerExtendedUpdate],
    Field(discriminator="kind"),
]


class SellerProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    seller_id: str
    company_name: str
    description: str | None = None
    country: str | None = None
    tax_id: str | None = None
    primary_category_id: str | None = None
    is_verified: bool
    has_verified_badge: bool
    premium_since: datetime | None = None
