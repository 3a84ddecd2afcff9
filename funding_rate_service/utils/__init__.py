"""
Utilities for Funding Rate Service
"""
