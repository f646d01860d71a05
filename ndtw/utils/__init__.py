"""
Utils
-----
"""
