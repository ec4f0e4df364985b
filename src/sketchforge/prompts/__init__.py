"""Prompt building for model-augmented generation."""

from sketchforge.prompts.builder import PromptBuilder, required_first_line
from sketchforge.prompts.loader import TemplateLoader

__all__ = ["PromptBuilder", "TemplateLoader", "required_first_line"]
