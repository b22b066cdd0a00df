"""Domain Layer: value objects, errors, events, and ports.

Has no dependency on httpx or any other infrastructure library.
"""
