"""Protocol strategy pairs.

A session selects one :class:`ProtocolStrategy` up front and from then on
only talks to the decoder/interpreter it produces; nothing else in the
streaming package branches on the protocol mode.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict
from urllib.parse import quote

from ..base.models import OutboundMessage
from ..base.protocol import (
    CURRENT_PATH_TEMPLATE,
    LEGACY_PATH_TEMPLATE,
    ContentMode,
    ProtocolMode,
)
from .frame_decoder import FrameDecoder, InlineTagFrameDecoder, SentinelFrameDecoder
from .frame_interpreter import FrameInterpreter, InlineTagInterpreter, JsonObjectInterpreter


@dataclass(frozen=True)
class ProtocolStrategy:
    mode: ProtocolMode
    path_template: str
    legacy_body: bool
    decoder_factory: Callable[[], FrameDecoder]
    interpreter_factory: Callable[[ContentMode], FrameInterpreter]

    def endpoint(self, agent: str, conversation_id: str) -> str:
        """Path for one conversation; segments are percent-encoded."""
        if not agent or not conversation_id:
            raise ValueError("agent and conversation_id are required")
        return self.path_template.format(
            agent=quote(str(agent), safe=""),
            conversation_id=quote(str(conversation_id), safe=""),
        )

    def body(self, message: OutboundMessage) -> Dict[str, Any]:
        return message.to_body(legacy=self.legacy_body)

    def new_decoder(self) -> FrameDecoder:
        return self.decoder_factory()

    def new_interpreter(self, content_mode: ContentMode = ContentMode.AUTO) -> FrameInterpreter:
        return self.interpreter_factory(content_mode)


STRATEGIES: Dict[ProtocolMode, ProtocolStrategy] = {
    ProtocolMode.SENTINEL_JSON: ProtocolStrategy(
        mode=ProtocolMode.SENTINEL_JSON,
        path_template=CURRENT_PATH_TEMPLATE,
        legacy_body=False,
        decoder_factory=SentinelFrameDecoder,
        interpreter_factory=JsonObjectInterpreter,
    ),
    ProtocolMode.INLINE_TAG: ProtocolStrategy(
        mode=ProtocolMode.INLINE_TAG,
        path_template=LEGACY_PATH_TEMPLATE,
        legacy_body=True,
        decoder_factory=InlineTagFrameDecoder,
        # tagged sections are line-routed deltas; content mode does not apply
        interpreter_factory=lambda _mode: InlineTagInterpreter(),
    ),
}


def get_strategy(mode: "str | ProtocolMode") -> ProtocolStrategy:
    """Return the strategy for ``mode`` (enum value or alias)."""
    return STRATEGIES[ProtocolMode.parse(mode)]


__all__ = ["ProtocolStrategy", "STRATEGIES", "get_strategy"]
