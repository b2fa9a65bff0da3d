"""
Catalog API: árbol de categorías con ruta materializada.
"""
__version__ = "1.0.0"
