"""
Folio project package.

Keep this file free of side effects: no Django imports, no settings
access, no I/O. It only carries static project metadata.
"""

__all__ = ["__version__", "__description__"]

__version__ = "1.0.0"
__description__ = "Portfolio and blog backend with draft/publish content blocks."
