"""
Shared utilities: exceptions, logging and decorators.
"""
