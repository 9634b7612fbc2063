"""
Domain Layer - Records, version specs, events and boundary interfaces.
"""
