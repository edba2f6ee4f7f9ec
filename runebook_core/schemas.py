from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


TBaseSchema = TypeVar("TBaseSchema", bound="BaseSchema")


class BaseSchema(BaseModel):
    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json")

    @classmethod
    def from_json(cls: type[TBaseSchema], data: str | bytes) -> TBaseSchema:
        return cls.model_validate_json(data)

    @classmethod
    def from_dict(cls: type[TBaseSchema], data: Mapping[str, object]) -> TBaseSchema:
        return cls.model_validate(data)


class Category(str, Enum):
    RUNE = "rune"
    RUNEWORD = "runeword"
    QUEST = "quest"
    MERC = "merc"


class Provenance(str, Enum):
    CUSTOM = "custom"
    SEED = "seed"


class NewItem(BaseSchema):
    """An item as submitted by a user or shipped in a seed dataset.

    Seed documents use the ``type``/``meta`` spellings; both are accepted.
    Any ``id`` or provenance keys in the input are ignored, the store assigns
    those on insert.
    """

    model_config = ConfigDict(extra="ignore")

    category: Category = Field(validation_alias=AliasChoices("category", "type"))
    name: str
    description: str
    tags: list[str] = Field(default_factory=list)
    extra: Any = Field(default=None, validation_alias=AliasChoices("extra", "meta"))

    @field_validator("name", "description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def tags_default(cls, value: object) -> object:
        if value is None:
            return []
        return value


class ItemRecord(NewItem):
    id: int = Field(ge=1)
    provenance: Provenance

    @property
    def is_custom(self) -> bool:
        return self.provenance is Provenance.CUSTOM


class VersionDescriptor(BaseSchema):
    version: int = Field(ge=0)


class SeedDataFile(BaseSchema):
    version: int = Field(ge=0)
    items: list[NewItem] = Field(default_factory=list)


class RemoteSourceConfig(BaseSchema):
    source_type: Literal["http", "directory"] = "directory"
    base_url: str | None = None
    directory: str | None = "data/remote"
    version_path: str = "db_version.json"
    dataset_path: str = "data.json"
    timeout_seconds: float | None = None
