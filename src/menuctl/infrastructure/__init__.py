"""Infrastructure layer — persistence gateways and the SQLite database.

This layer depends on the domain models and third-party libs (SQLAlchemy).
It must never import from services, commands, or output.
"""
