"""
Domain layer - pure business logic
"""
