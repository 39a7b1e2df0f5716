"""SoloQuest backend: persistence facade and JSON API for the project planner."""

__version__ = "1.0.0"
