"""
fedplan: break-even optimization and scenario comparison for federal
retirement plans.
"""

__version__ = "0.1.0"
