"""
Sample data loader for the movie catalog
"""
