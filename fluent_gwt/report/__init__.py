from fluent_gwt.report.markdown import render_index, render_record, slugify
from fluent_gwt.report.mermaid import generate_sequence_diagram, parse_interaction

__all__ = ["generate_sequence_diagram", "parse_interaction", "render_index", "render_record", "slugify"]
