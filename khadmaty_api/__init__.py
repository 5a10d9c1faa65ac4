"""
Top-level package for the Khadmaty API.

Makes ``khadmaty_api`` importable so that modules under ``app`` can be
referenced with fully qualified names such as ``khadmaty_api.app.main``.
"""

__all__ = []
