"""Organizations module - the caller's own organization and its plan usage."""
