"""
Concrete implementations of the nodegrad domain contracts.
"""
