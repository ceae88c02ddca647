"""
Domain layer package.

Contains pure business logic: entities, value objects, slug rules,
and port interfaces. No framework imports, no IO, no side effects.
"""
