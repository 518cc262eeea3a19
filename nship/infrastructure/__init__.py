"""
Infrastructure layer - concrete implementations of core interfaces
"""
