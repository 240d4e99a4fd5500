"""
Top-level package for the Usuarios API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``usuarios_api.app.main:app``.
"""

__all__ = []
