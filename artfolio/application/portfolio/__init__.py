"""
Application layer for the portfolio bounded context.

Services and use cases coordinate domain entities and ports to fulfill
business operations. No framework or infrastructure imports allowed.
"""
