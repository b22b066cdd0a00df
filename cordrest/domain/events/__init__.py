"""Domain Event definitions.

Significant occurrences during a dispatch, logged by the dispatcher.
"""
