"""
Form schema DTOs and the one place that parses schema text.

An assistant message may carry a *form schema*: an ordered list of field
descriptors that the UI renders as a dynamic input form. On the wire it
arrives either as a JSON-encoded string (sentinel protocol, ``formSchema``
key) or as raw JSON lines inside a ``<dynamic_form_schema>`` section (legacy
protocol). Both end up in :func:`parse_form_schema`.

Validation is done with Pydantic; unknown keys are preserved so that the
delivered schema round-trips to what the server sent.
"""

from __future__ import annotations

import json
from typing import Any, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import SchemaParseError

FieldType = Literal[
    "input",
    "select",
    "file",
    "radio",
    "checkbox",
    "switch",
    "textarea",
    "toggle-group",
]


class FormField(BaseModel):
    """One field descriptor of a dynamic form."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str = Field(..., min_length=1)
    label: str
    type: FieldType
    values: Optional[List[Any]] = None
    accept: Optional[str] = None
    multiple: Optional[bool] = None
    default_value: Any = Field(default=None, alias="defaultValue")
    placeholder: Optional[str] = None
    description: Optional[str] = None
    required: Optional[bool] = None

    def to_wire(self) -> dict:
        """Return the camelCase mapping the server sent (``None`` keys dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True)


FormSchema = Tuple[FormField, ...]

_SCHEMA_ADAPTER = TypeAdapter(List[FormField])


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence (```json ... ```), if any."""
    s = text.strip()
    if s.startswith("```json"):
        s = s[7:]
    elif s.startswith("```"):
        s = s[3:]
    if s.endswith("```"):
        s = s[:-3]
    return s.strip()


def parse_form_schema(raw: Union[str, Sequence[Any]]) -> FormSchema:
    """Parse schema text (or an already-decoded list) into ``FormField`` items.

    Raises:
        SchemaParseError: when the text is not JSON, not a list, or any item
            fails field validation. The caller decides whether that is fatal
            (it never is for a stream session).
    """
    schema_text = raw if isinstance(raw, str) else json.dumps(raw, ensure_ascii=False)
    try:
        data = json.loads(strip_code_fences(raw)) if isinstance(raw, str) else raw
        # double-encoded twice over: the server occasionally stringifies once more
        if isinstance(data, str):
            data = json.loads(data)
        fields = _SCHEMA_ADAPTER.validate_python(data)
    except (ValueError, TypeError, ValidationError) as e:
        raise SchemaParseError(
            message=f"form schema could not be parsed: {_first_line(e)}",
            schema_text=schema_text,
            raw=e,
        ) from e
    return tuple(fields)


def schema_to_wire(schema: Optional[FormSchema]) -> Optional[List[dict]]:
    return None if schema is None else [f.to_wire() for f in schema]


def _first_line(exc: BaseException) -> str:
    text = str(exc).strip()
    return text.splitlines()[0] if text else exc.__class__.__name__


__all__ = [
    "FieldType",
    "FormField",
    "FormSchema",
    "parse_form_schema",
    "schema_to_wire",
    "strip_code_fences",
]
