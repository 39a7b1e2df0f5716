"""
High-level use cases for the SoloQuest backend.

``DatabaseClient`` is the persistence facade; the other modules build on the
records it returns (session tokens, dashboard statistics).
"""
