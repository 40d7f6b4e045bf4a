"""Streaming package: decode, interpret and assemble chat reply streams.

Exposes the frame decoders and interpreters (one strategy pair per wire
protocol), the message assembler, the I/O-free pipeline and the HTTP stream
session under a single namespace.
"""

from .assembler import MessageAssembler
from .frame_decoder import FrameDecoder, InlineTagFrameDecoder, SentinelFrameDecoder
from .frame_interpreter import FrameInterpreter, InlineTagInterpreter, JsonObjectInterpreter
from .metrics import StreamMetrics
from .pipeline import OnFragment, StreamPipeline, decode_body
from .result import SessionResult, SessionState
from .session import MessageInput, StreamSession
from .strategy import STRATEGIES, ProtocolStrategy, get_strategy

__all__ = [
    "FrameDecoder",
    "SentinelFrameDecoder",
    "InlineTagFrameDecoder",
    "FrameInterpreter",
    "JsonObjectInterpreter",
    "InlineTagInterpreter",
    "MessageAssembler",
    "StreamMetrics",
    "OnFragment",
    "StreamPipeline",
    "decode_body",
    "SessionResult",
    "SessionState",
    "MessageInput",
    "StreamSession",
    "ProtocolStrategy",
    "STRATEGIES",
    "get_strategy",
]
