"""Core models - users and roles"""
