"""
Planar computational geometry: vector algebra, polygons, Delaunay
triangulation and Voronoi diagrams.
"""

__version__ = "0.1.0"
