"""Kasir API: product and category CRUD over a small SQL access layer."""

__version__ = "1.0.0"
