"""
API package for the audit log
Contains the HTTP API used by remote producers
"""

from .routes import api_bp

__all__ = ["api_bp"]
