"""
Request bodies for the JSON API.

Fields are optional at this layer: presence/emptiness checks live in the
services so that a missing field and an empty one produce the same
``success: false`` answer. Catalog and order fields are stored as given,
so they accept any JSON value.
"""

from typing import Any, Optional

from pydantic import BaseModel


class RegisterBody(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginBody(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class RequestBody(BaseModel):
    """Customer order for one catalog service."""

    service: Optional[Any] = None
    link: Optional[Any] = None
    quantity: Optional[Any] = None
    notes: Optional[Any] = None


class ServiceBody(BaseModel):
    name: Optional[Any] = None
    icon: Optional[Any] = None
    description: Optional[Any] = None


class ServiceNameBody(BaseModel):
    name: Optional[Any] = None


class AlertBody(BaseModel):
    message: Optional[Any] = None
