"""Host adapters that drive the toolbar engine from a UI toolkit."""
