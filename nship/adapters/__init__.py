"""
Adapters layer - SSH, configuration and CLI
"""
