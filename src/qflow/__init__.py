"""
Questionnaire Flow-Resolution Engine (qflow)

Decides which questions of a declarative catalog are in the current
conversation, and how complex the project is.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Interactive prompting
    - Template population or document rendering
    - Answer persistence

Every function is pure: the catalog, tag schema and answers are passed
in explicitly and never mutated. There is no global registry or cache.
"""

__version__ = "0.1.0"
