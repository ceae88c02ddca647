"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: storage backends, file hosting,
and identity resolution.
"""
