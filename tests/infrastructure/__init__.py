"""
Shared test infrastructure.
"""
