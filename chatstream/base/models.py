"""Public facade for chatstream DTOs.

Implementations live in ``models_parts`` (one concern per module); import
from here.
"""

from .models_parts.chat_message import ROLES, ChatMessage, Role
from .models_parts.form_field import (
    FieldType,
    FormField,
    FormSchema,
    parse_form_schema,
    schema_to_wire,
    strip_code_fences,
)
from .models_parts.fragment import UNPARSED, Frame, MessageFragment
from .models_parts.outbound import OutboundMessage

__all__ = [
    "ChatMessage",
    "Role",
    "ROLES",
    "FieldType",
    "FormField",
    "FormSchema",
    "parse_form_schema",
    "schema_to_wire",
    "strip_code_fences",
    "Frame",
    "MessageFragment",
    "UNPARSED",
    "OutboundMessage",
]
