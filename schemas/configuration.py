from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConfigItemSchema(BaseModel):
    id: str
    category: str
    value: str
    is_active: bool = True
    display_order: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ConfigItemCreate(BaseModel):
    """Row for bulk seeding the configuration table."""

    category: str
    value: str
    display_order: int = 0


class ConfigValueIn(BaseModel):
    value: str = Field(..., min_length=1, description="Option value, officer name or bank name")


class ConfigurationResponse(BaseModel):
    options: dict[str, list[str]]
    officers: list[str]
    banks: list[str]
    error: Optional[str] = None
