"""Domain Interfaces (Ports):

Contracts (Abstract Base Classes) for the transport and the body codec.
The dispatcher depends on these, not on concrete implementations.
"""
