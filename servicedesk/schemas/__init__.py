"""Pydantic request bodies accepted by the JSON API."""
