from .graph import RoutineGraph, generation_input_for
from .nodes import history_node, prompt_node, generate_node, validate_node

__all__ = [
    "RoutineGraph",
    "generation_input_for",
    "history_node",
    "prompt_node",
    "generate_node",
    "validate_node",
]
