from .base import Opener
from .platform import PlatformOpener

__all__ = ["Opener", "PlatformOpener"]
