"""Pydantic models for form definitions.

The wire format keeps the camelCase keys used by the form builder
(`minLength`, `maxLength`, `rowLabels`) and discriminates fields on `type`.
Models accept either the alias or the attribute name and should be dumped
with `by_alias=True`.
"""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TextValidation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    required: Optional[bool] = None
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")


class DropdownValidation(BaseModel):
    required: Optional[bool] = None


class TextField(BaseModel):
    id: str
    type: Literal["text"] = "text"
    label: str = ""
    validation: TextValidation = Field(default_factory=TextValidation)


class DropdownField(BaseModel):
    id: str
    type: Literal["dropdown"] = "dropdown"
    label: str = ""
    options: List[str] = Field(default_factory=list)
    validation: DropdownValidation = Field(default_factory=DropdownValidation)
    # option -> target field id
    condition: Optional[Dict[str, str]] = None


class TableColumn(BaseModel):
    id: str
    type: Literal["text", "dropdown"] = "text"
    label: str = ""
    options: Optional[List[str]] = None
    # Mirrors both text and dropdown rules; dropdown columns ignore the lengths.
    validation: TextValidation = Field(default_factory=TextValidation)


class TableField(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: Literal["table"] = "table"
    label: str = ""
    columns: List[TableColumn] = Field(default_factory=list)
    mode: Literal["static", "dynamic"] = "dynamic"
    row_labels: Optional[List[str]] = Field(default=None, alias="rowLabels")


FormField = Annotated[Union[TextField, DropdownField, TableField], Field(discriminator="type")]


class FormSchema(BaseModel):
    """A form definition; `id` is assigned by the store on creation."""

    id: Optional[str] = None
    title: str = ""
    fields: List[FormField] = Field(default_factory=list)

    def to_document(self) -> dict:
        """Return the JSON-ready wire representation."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "TextValidation",
    "DropdownValidation",
    "TextField",
    "DropdownField",
    "TableColumn",
    "TableField",
    "FormField",
    "FormSchema",
]
