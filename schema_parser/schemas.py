"""
Pydantic schemas for the data extracted from microdata annotations.

A schema root becomes a Group. Each property inside it holds one of three
variants, tagged by ``kind``:

  Leaf      → a single annotated element without annotated descendants
  Group     → an annotated element whose descendants carry more properties
  Repeated  → the same property name seen more than once at one level

to_data() turns any of them into plain JSON-compatible Python data:
  Leaf → {"value", "url", "src"},  Group → dict,  Repeated → list
"""

import os
from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, Field


class ExtractedValue(BaseModel):
    """Terminal value read from a leaf element."""
    value: Optional[str] = None    # content attr, else rendered text, else alt
    url: Optional[str] = None      # href → rendered as a link
    src: Optional[str] = None      # src → rendered as an image


class Leaf(BaseModel):
    kind: Literal["leaf"] = "leaf"
    extracted: ExtractedValue

    def to_data(self) -> dict:
        return self.extracted.model_dump()


class Group(BaseModel):
    """Ordered property-name → value mapping (insertion order is document order)."""
    kind: Literal["group"] = "group"
    properties: dict[str, "PropertyValue"] = Field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.properties

    def __len__(self) -> int:
        return len(self.properties)

    def get(self, key: str) -> Optional["PropertyValue"]:
        return self.properties.get(key)

    def to_data(self) -> dict:
        return {key: value.to_data() for key, value in self.properties.items()}


class Repeated(BaseModel):
    """Values of a property name that occurred more than once, in encounter order."""
    kind: Literal["repeated"] = "repeated"
    items: list[Annotated[Union[Leaf, Group], Field(discriminator="kind")]] = Field(default_factory=list)

    def to_data(self) -> list:
        return [item.to_data() for item in self.items]


PropertyValue = Annotated[Union[Leaf, Group, Repeated], Field(discriminator="kind")]

Group.model_rebuild()
Repeated.model_rebuild()


# --- Session configuration ---

class ParserConfig(BaseModel):
    """Options recognized by SchemaParser."""
    schema_name: str = Field(default="Product", min_length=1)          # itemtype suffix to scan for
    container_id: str = Field(default="jsSchemaParser", min_length=1)  # id of the owned output div
    class_namespace: str = Field(default="schema-parser", min_length=1)  # prefix for generated classes

    # Environment variable for each field, read by from_env()
    ENV_VARS: ClassVar[dict[str, str]] = {
        "schema_name": "SCHEMA_PARSER_SCHEMA_NAME",
        "container_id": "SCHEMA_PARSER_CONTAINER_ID",
        "class_namespace": "SCHEMA_PARSER_CLASS_NAMESPACE",
    }

    @classmethod
    def from_env(cls, **overrides) -> "ParserConfig":
        """
        Build a config from SCHEMA_PARSER_* environment variables.

        Keyword overrides win over the environment; None overrides are ignored
        so CLI flags that were not given fall through.
        """
        values = {}
        for field, env_var in cls.ENV_VARS.items():
            env_value = os.getenv(env_var)
            if env_value:
                values[field] = env_value
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def class_name(self, suffix: str) -> str:
        """Namespaced CSS class, e.g. class_name("table") → "schema-parser__table"."""
        return f"{self.class_namespace}__{suffix}"
