"""
Sradha's Notes: a personal notes & journaling service and its Python client
"""
__version__ = "1.0.0"
