"""Schemas for rendered form descriptions and submission validation results."""

from typing import Any, Optional

from pydantic import Field

from bizops.schemas.common import CamelModel, OptionOut


class FormControlOut(CamelModel):
    name: str
    label: str
    type: str
    control: str
    input_type: Optional[str] = None
    required: bool = False
    placeholder: Optional[str] = None
    options: list[OptionOut] = Field(default_factory=list)
    rows: Optional[int] = None
    col_span: Optional[int] = None
    hidden: bool = False
    widget: Optional[str] = None
    validation: dict[str, Any] = Field(default_factory=dict)


class FormSectionOut(CamelModel):
    name: str
    label: str
    hidden: bool = False
    controls: list[FormControlOut]


class FormOut(CamelModel):
    entity: str
    entity_name: str
    mode: str
    record_id: Optional[str] = None
    api_endpoint: str
    back_link: str
    sections: list[FormSectionOut]
    values: dict[str, Any]


class FormValidationOut(CamelModel):
    valid: bool
    data: dict[str, Any]
    errors: dict[str, str] = Field(default_factory=dict)
