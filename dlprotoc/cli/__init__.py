"""
Command-line interfaces for dlprotoc.
"""
