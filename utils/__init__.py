# utils/__init__.py
"""Infrastructure helpers - configuration and backend access"""
