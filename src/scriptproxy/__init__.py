"""
scriptproxy
Short-URL proxy for installer scripts hosted in a GitHub repository
"""
__version__ = "1.0.0"
