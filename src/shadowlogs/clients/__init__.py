"""Network clients (JSON-RPC)."""
