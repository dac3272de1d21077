"""
Core application package for Folio.

Keep this file free of side effects so imports remain predictable
and safe in management commands, migrations, and tests.
"""

__all__: list[str] = []
