"""Infrastructure layer: database engine, schema, ledger, and repositories.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It may import domain value types but never services, commands, or output.
"""
