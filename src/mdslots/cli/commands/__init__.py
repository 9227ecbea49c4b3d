"""Top-level mdslots commands (one module per command)."""
