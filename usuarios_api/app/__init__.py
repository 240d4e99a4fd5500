"""
Application package initializer.

The service is organised in layers: ``api`` (HTTP routers, versioned
under ``api/<version>/``), ``services`` (business rules),
``repositories`` (storage) and ``schemas`` (pydantic models), with
shared configuration, logging and database helpers in ``core``.
"""

from .main import app  # noqa: F401
