"""Core business logic layer.

Subpackages:
- planning: week arithmetic and the meal planning engine (eligibility + ownership cascade)
- shopping: grouping raw shopping items and the shopping list operations
"""
__all__ = ["planning", "shopping"]
