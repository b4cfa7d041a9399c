"""Repository layer: SQL for categories/products/health on top of kasir.db.

Statements use PostgreSQL-style `$n` placeholders; the driver adapts them.
"""
