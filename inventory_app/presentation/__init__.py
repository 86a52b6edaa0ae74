"""HTTP layer: blueprints and error handlers"""
