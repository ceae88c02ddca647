"""
Artfolio — public portfolio pages for performing and visual artists.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - portfolio: Users, portfolio pages, artwork images, events.

Layers:
    - domain: Entities, ports (ABCs), errors, slug rules.
    - application: Data-access services, use cases, DTOs.
    - infrastructure: Storage, file-hosting and identity adapters.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
