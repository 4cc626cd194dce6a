"""
Shared infrastructure for the verifier: logging, errors and settings.
"""
