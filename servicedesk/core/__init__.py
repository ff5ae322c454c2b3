"""
Core utilities shared across the servicedesk API.

This package hosts:
- configuration helpers (env vars, data paths, feature flags)
- cross-cutting services such as logging, password hashing, the
  notification adapter, rate limit helpers and the error taxonomy.

Routers and services depend on these primitives instead of reading
os.environ or configuring handlers themselves.
"""
