"""
Ripple - DNS propagation checker
"""
__version__ = "1.0.0"
