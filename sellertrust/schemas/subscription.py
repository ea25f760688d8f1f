"""Premium subscription schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DurationPolicy(BaseModel):
    """How long a new subscription runs.

    days=None uses the configured default; open_ended leaves the end date unset.
    """

    days: int | None = Field(default=None, gt=0)
    open_ended: bool = False
    auto_renew: bool = True


class SubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subscription_id: str
    seller_id: str
    payment_id: str | None = None
    plan_type: str
    start_date: datetime
    end_date: datetime | None = None
    is_active: bool
    auto_renew: bool
    deactivation_reason: str | None = None
