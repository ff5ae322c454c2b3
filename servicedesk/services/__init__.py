"""
High-level use cases for the servicedesk API.

Each service module orchestrates the document store and adapters to
implement business rules (register, login, submit request, manage catalog).

Routers (FastAPI endpoints) call these services instead of manipulating the
JSON documents or sessions directly.
"""
