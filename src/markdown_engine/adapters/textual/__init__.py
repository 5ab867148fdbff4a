"""Textual host for the toolbar engine.

Only the controller is imported here; ``app`` needs the optional
``textual`` dependency.
"""

from .controller import TERMINAL_CHORD_ALIASES, TextualToolbarAdapter, TextualUIHooks

__all__ = ["TERMINAL_CHORD_ALIASES", "TextualToolbarAdapter", "TextualUIHooks"]
