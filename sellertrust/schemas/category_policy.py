"""Category badge policy schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BadgePolicyIn(BaseModel):
    """Create/replace payload for a category's badge policy."""

    allows_badge: bool = False
    min_certifications: int = Field(default=0, ge=0)
    required_certifications: frozenset[str] = frozenset()

    @field_validator("required_certifications", mode="before")
    @classmethod
    def split_legacy_list(cls, v):
        """Accept a comma/semicolon separated string as well as a collection."""
        if isinstance(v, str):
            v = v.replace(";", ",").split(",")
        return v

    @field_validator("required_certifications", mode="after")
    @classmethod
    def drop_blank_names(cls, v: frozenset[str]) -> frozenset[str]:
        return frozenset(name.strip() for name in v if name.strip())


class BadgePolicyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    policy_id: str
    category_id: str
    allows_badge: bool
    min_certifications: int
    required_certifications: list[str]
    created_at: datetime
    updated_at: datetime | None = None
