"""
Todo subsystem.

Components:
- timeutil.py: canonical local-time strings ("YYYY-MM-DD HH:MM"), alert derivation
- todo_models.py: data structures (Todo)
- todo_store.py: SQLite-backed storage + reminder query/update helpers
- category.py: keyword category classifier
- todo_api.py: small high-level helpers used by the command surface
"""
