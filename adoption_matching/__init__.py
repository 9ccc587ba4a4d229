"""
Adoption Matching Engine

This package implements the matching and scoring core of the adoption
platform: it ranks adoptable animals for an adopter and scores submitted
adoption applications.

Key Design Decisions:
- Two independent matching strategies (scaled nearest-neighbor ranking and
  weighted compatibility scoring), kept separate because their scores are not
  equivalent
- The pretrained scaler configuration is an immutable value loaded once and
  injected, never a module-level singleton
- Every component is a pure computation; persistence and transport belong to
  the calling service
"""

__version__ = "1.0.0"
