"""Data layer - SQLAlchemy models only, no business logic"""
