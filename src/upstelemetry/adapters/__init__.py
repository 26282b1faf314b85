"""Adapters implementing core ports against upsc, SQLite and HTTP."""
