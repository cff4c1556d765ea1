"""
Application layer for the exercise metrics engine.

This package contains:
- ports/: Interfaces for the external collaborators the engine talks to
  (catalog source, narrative text generator)
"""
