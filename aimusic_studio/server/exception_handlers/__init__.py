"""
Exception handlers for the AI Music Studio server.

This package maps provider failures and unexpected exceptions to JSON
responses and provides a setup function to register them.
"""

from .global_handler import global_exception_handler, provider_exception_handler, setup_exception_handlers

__all__ = ["global_exception_handler", "provider_exception_handler", "setup_exception_handlers"]
