"""Binary stream primitives shared by every wire form."""
from .stream import StreamInput, StreamOutput

__all__ = ["StreamInput", "StreamOutput"]
