"""Deterministic document generation."""

from sketchforge.templates.component_spec import render_component_spec
from sketchforge.templates.markers import has_markers, needs_confirmation, needs_input
from sketchforge.templates.protocol import render_agent_protocol
from sketchforge.templates.rules import render_project_rules
from sketchforge.templates.sections import detect_project_type

__all__ = [
    "detect_project_type",
    "has_markers",
    "needs_confirmation",
    "needs_input",
    "render_agent_protocol",
    "render_component_spec",
    "render_project_rules",
]
