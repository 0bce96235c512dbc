"""
Movie catalog HTTP API service
"""
