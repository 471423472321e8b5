"""
Shared pieces used by every app: the error taxonomy and the DRF exception handler.
"""
