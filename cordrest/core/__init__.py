"""Core Application Layer: request dispatch and the endpoint catalog.

Connects the domain layer with the infrastructure layer through interfaces.
Contains the dispatcher, the endpoint functions, and the command handler.
"""
