"""Service layer — editing core and the CLI-facing facade.

Services may import from domain, infrastructure, and plugins.
They must never import from commands or output.
"""
