"""Request dispatch — the only layer that sees raw ASGI calls."""
