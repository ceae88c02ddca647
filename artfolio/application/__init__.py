"""
Application layer package.

Contains the data-access services and the use cases that orchestrate them.
This layer depends on domain ports, never on infrastructure.
"""
