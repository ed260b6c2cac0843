from .bridge import CANCEL_EXIT_CODES, Chooser, CommandChooser, FzfChooser, parse_selection
from .loading import load_chooser

__all__ = [
  "CANCEL_EXIT_CODES",
  "Chooser",
  "CommandChooser",
  "FzfChooser",
  "parse_selection",
  "load_chooser",
]
