"""
NetCafe - multi-tenant restaurant management backend
"""

__version__ = "1.0.0"
