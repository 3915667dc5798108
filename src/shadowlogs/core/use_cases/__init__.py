"""Application use cases built on the core interfaces."""
