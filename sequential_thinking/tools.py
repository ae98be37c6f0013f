"""Built-in sequential thinking tools."""
import logging
from typing import Any, Mapping

from .registry import Tool, ToolRegistry

logger = logging.getLogger(__name__)


def dynamic_thought_branching(params: Mapping[str, Any]) -> str:
    """Branch a line of reasoning from the given thought."""
    logger.debug(f"Executing dynamic_thought_branching with thought: {params['thought']}")
    return f"Branching thought: {params['thought']}"


def hypothesis_generation(params: Mapping[str, Any]) -> str:
    """Generate a hypothesis for the given context."""
    logger.debug(f"Executing hypothesis_generation with context: {params['context']}")
    return f"Generating hypothesis for context: {params['context']}"


BUILTIN_TOOLS = (
    Tool(
        name="dynamic_thought_branching",
        description="Branch a new line of reasoning from a thought",
        parameters={
            "type": "object",
            "properties": {
                "thought": {"type": "string"},
            },
            "required": ["thought"],
        },
        handler=dynamic_thought_branching,
    ),
    Tool(
        name="hypothesis_generation",
        description="Generate a hypothesis for a given context",
        parameters={
            "type": "object",
            "properties": {
                "context": {"type": "string"},
            },
            "required": ["context"],
        },
        handler=hypothesis_generation,
    ),
)


def register_builtin_tools(registry: ToolRegistry) -> ToolRegistry:
    """Register the built-in tools on ``registry`` and return it."""
    for tool in BUILTIN_TOOLS:
        registry.register(tool)
    return registry


def build_default_registry() -> ToolRegistry:
    """Create a registry holding only the built-in tools."""
    return register_builtin_tools(ToolRegistry())
