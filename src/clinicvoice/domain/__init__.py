"""
Domain layer: visits, form slots and their business rules.
"""
