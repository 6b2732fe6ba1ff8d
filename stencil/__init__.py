"""stencil -- scaffold new projects from dependency-aware blueprints.

Subpackages:
    questions   - Question loading, dependency ordering, answer collection
    scaffolder  - Rendering to an in-memory tree and transactional apply
"""

__version__ = "0.1.0"
