"""Domain models: value objects for requests, responses, results and policies."""
