"""Authentication helpers: JWT codec, request gateway and OAuth payloads."""
