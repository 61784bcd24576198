"""HTTP adapters — structured request and response over raw ASGI."""
