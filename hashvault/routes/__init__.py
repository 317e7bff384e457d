"""Routes package for hashvault"""
from .content import content_bp
from .references import references_bp

__all__ = ['content_bp', 'references_bp']
