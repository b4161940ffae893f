"""API Resilience Implementations.

Contains the retry controller (exponential backoff, Retry-After handling)
and the shared rate limiter used to coordinate backoff across threads.
Bounded Context: API Resilience
"""
