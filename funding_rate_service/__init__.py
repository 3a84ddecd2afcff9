"""
Funding rate aggregation and cross-exchange comparison service
"""
