"""
Interfaces Layer

Entry points into the launcher.
"""
