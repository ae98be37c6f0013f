"""Tool registry for the MCP server."""
import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from .utils.errors import DuplicateToolError
from .validation import CompiledValidator, compile_schema

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Mapping[str, Any]], Any]


@dataclass(frozen=True)
class Tool:
    """A named unit of executable logic invoked via ``tools/call``.

    ``handler`` receives the request params mapping and returns the result;
    it may be a plain function or a coroutine function.
    """

    name: str
    handler: ToolHandler
    parameters: Optional[Dict[str, Any]] = None
    description: str = ""


class ToolRegistry:
    """Holds the available tools in registration order."""

    def __init__(self):
        self.tools: Dict[str, Tool] = {}
        self.validators: Dict[str, CompiledValidator] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            DuplicateToolError: if a tool with the same name exists.
            SchemaError: if the tool's parameter schema cannot be compiled.
        """
        if tool.name in self.tools:
            raise DuplicateToolError(tool.name)

        if tool.parameters is not None:
            # Own a private copy so later edits to the caller's dict have no effect.
            parameters = copy.deepcopy(tool.parameters)
            validator = compile_schema(parameters)
            tool = Tool(
                name=tool.name,
                handler=tool.handler,
                parameters=parameters,
                description=tool.description,
            )
            self.validators[tool.name] = validator

        self.tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")

    def find(self, name: Any) -> Optional[Tool]:
        if not isinstance(name, str):
            return None
        return self.tools.get(name)

    def validator(self, name: str) -> Optional[CompiledValidator]:
        """Compiled parameter validator, or None if the tool declares no schema."""
        return self.validators.get(name)

    def list_all(self) -> List[Dict[str, Any]]:
        """List all registered tools in registration order."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": copy.deepcopy(tool.parameters),
            }
            for tool in self.tools.values()
        ]

    def names(self) -> List[str]:
        return list(self.tools)

    def __len__(self) -> int:
        return len(self.tools)

    def __contains__(self, name: object) -> bool:
        return name in self.tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self.tools.values())
