"""
Monitoring engine
"""
