"""HTTP adapters: request building, transport, pagination and response normalization."""
