"""
Domain layer for the inventory management system.
Contains session handling, stock posting and the error taxonomy,
separated from data persistence concerns.
"""
