"""Domain layer for Forge Tracker.

Contains the domain model, the session variant and the pure progression rules.
This layer has no dependencies on infrastructure concerns.
"""
