"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the dispatcher to the outside world (HTTPS transport, JSON codec,
configuration files, console output) by implementing the domain interfaces.
"""
