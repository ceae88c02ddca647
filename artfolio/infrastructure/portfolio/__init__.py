"""
Infrastructure adapters for the portfolio bounded context.

Each adapter implements a domain port (ABC) and connects
to an external system: a database, a hosted table store, a file host.
"""
