"""
Portfolio bounded context — domain layer.

- Users, portfolio pages, artwork images and events
- Slug rules for public portfolio URLs
- Ports for storage, file hosting and identity
"""
