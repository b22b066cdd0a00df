"""API Resilience Implementations.

Contains the optional shared rate-limit gate layered on top of the
per-call retry loop.
Bounded Context: API Resilience
"""
