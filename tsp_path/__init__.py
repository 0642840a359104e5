"""
Genetic-algorithm search for short open paths through a set of 2-D towns.
"""

__all__ = [
    "data",
    "evaluation",
    "evolutionary",
    "population",
    "render",
]
