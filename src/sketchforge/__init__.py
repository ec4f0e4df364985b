"""Sketchforge - architecture sketch to agent blueprint compiler.

This package compiles a typed architecture graph into a documentation bundle
for AI coding assistants: a project rules file, an agent protocol file, and
one specification per component. Generation runs either from deterministic
templates or through a model-augmented path seeded with the same verified
facts.
"""

__version__ = "0.1.0"
