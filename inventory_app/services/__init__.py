"""
Services Layer
Data getters and CRUD helpers used primarily in routes.

Services should:
- Read and write catalog rows through an injected session
- Aggregate rows from multiple models for listings and reports
- Raise errors from inventory_app.buisness.core.errors instead of returning status codes
"""
