from .store import TraceStoreJSONL
from .trace_emitter import TraceEmitter

__all__ = ["TraceEmitter", "TraceStoreJSONL"]
