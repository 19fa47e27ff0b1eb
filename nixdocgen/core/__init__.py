"""Core extraction engine: syntax adapter, doc model, resolver and renderers."""
