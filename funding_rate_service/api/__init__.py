"""
HTTP API for the funding rate service
"""
