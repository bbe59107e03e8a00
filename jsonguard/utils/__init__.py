"""Shared helpers: runtime type naming, date coercion and logging setup."""
