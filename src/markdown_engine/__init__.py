"""Host-agnostic markdown toolbar engine for multilingual articles."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "editor",
    "keymaps",
    "preview",
    "runtime",
    "transforms",
    "translation",
]

__version__ = "0.1.0"
