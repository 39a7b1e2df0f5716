"""
Core utilities shared across the SoloQuest backend.

This package hosts configuration (environment settings), logging setup and the
security primitives (password hashing, session tokens).
"""
