"""
Web interface for the property dashboard.
"""
