from .errors import ChooserUnavailable, ClassificationAmbiguous, KozutsumiError, ParcelNotFound, ValidationError
from .resource import ApplicationName, DeepLink, FilesystemPath, OpenResult, Resource, WebURL
from .classifier import classify
from .runtime_context import RuntimeContext

__all__ = [
  "KozutsumiError",
  "ValidationError",
  "ParcelNotFound",
  "ChooserUnavailable",
  "ClassificationAmbiguous",
  "ApplicationName",
  "DeepLink",
  "FilesystemPath",
  "OpenResult",
  "Resource",
  "WebURL",
  "classify",
  "RuntimeContext",
]
