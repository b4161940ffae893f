"""Domain events emitted by the request engine (retries, deferrals, pages)."""
