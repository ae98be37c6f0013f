"""Tool parameter schema compilation and validation.

Schema definitions use the JSON Schema vocabulary the MCP tools declare
(``type``, ``properties``, ``required``, ``items``). They are compiled once
into a tree of immutable schema variants, and candidates are checked against
that tree.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .utils.errors import SchemaError


@dataclass(frozen=True)
class AnySchema:
    """Property declared without a type; any value passes."""


@dataclass(frozen=True)
class StringSchema:
    pass


@dataclass(frozen=True)
class NumberSchema:
    pass


@dataclass(frozen=True)
class IntegerSchema:
    pass


@dataclass(frozen=True)
class BooleanSchema:
    pass


@dataclass(frozen=True)
class ArraySchema:
    items: "SchemaNode" = field(default_factory=AnySchema)


@dataclass(frozen=True)
class ObjectSchema:
    # Declaration order is kept so that errors come out in a stable order.
    properties: Tuple[Tuple[str, "SchemaNode"], ...] = ()
    required: Tuple[str, ...] = ()


SchemaNode = Union[
    AnySchema,
    StringSchema,
    NumberSchema,
    IntegerSchema,
    BooleanSchema,
    ArraySchema,
    ObjectSchema,
]

_SCALAR_TYPES = {
    "string": StringSchema,
    "number": NumberSchema,
    "integer": IntegerSchema,
    "boolean": BooleanSchema,
}


@dataclass(frozen=True)
class FieldError:
    """A single validation failure.

    ``field`` is the dotted path of the offending property, or ``None`` when
    the candidate itself is at fault.
    """

    field: Optional[str]
    message: str
    expected: Optional[str] = None
    actual: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Tuple[FieldError, ...] = ()

    def errors_as_data(self) -> List[Dict[str, Any]]:
        return [error.to_dict() for error in self.errors]


def json_type_name(value: Any) -> str:
    """Return the JSON type name of a decoded JSON value."""
    if value is None:
        return "null"
    # bool is a subclass of int and must be checked first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def schema_type_name(node: SchemaNode) -> str:
    if isinstance(node, AnySchema):
        return "any"
    if isinstance(node, StringSchema):
        return "string"
    if isinstance(node, NumberSchema):
        return "number"
    if isinstance(node, IntegerSchema):
        return "integer"
    if isinstance(node, BooleanSchema):
        return "boolean"
    if isinstance(node, ArraySchema):
        return "array"
    if isinstance(node, ObjectSchema):
        return "object"
    raise TypeError(f"Unknown schema node: {node!r}")


def _matches(node: SchemaNode, value: Any) -> bool:
    """Check only the type of ``value`` against ``node``, not its contents."""
    if isinstance(node, AnySchema):
        return True
    if isinstance(node, StringSchema):
        return isinstance(value, str)
    if isinstance(node, NumberSchema):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(node, IntegerSchema):
        if isinstance(value, bool):
            return False
        return isinstance(value, int) or (isinstance(value, float) and value.is_integer())
    if isinstance(node, BooleanSchema):
        return isinstance(value, bool)
    if isinstance(node, ArraySchema):
        return isinstance(value, (list, tuple))
    if isinstance(node, ObjectSchema):
        return isinstance(value, Mapping)
    raise TypeError(f"Unknown schema node: {node!r}")


def compile_node(definition: Any, path: str = "$") -> SchemaNode:
    """Compile one schema definition into a schema node.

    Raises:
        SchemaError: if the definition is not a mapping, names an unknown
            type, or has a malformed ``properties``/``required``/``items``.
    """
    if not isinstance(definition, Mapping):
        raise SchemaError(f"Schema at {path} must be an object")

    type_name = definition.get("type")
    if type_name is None:
        if "properties" in definition or "required" in definition:
            type_name = "object"
        else:
            return AnySchema()

    if type_name in _SCALAR_TYPES:
        return _SCALAR_TYPES[type_name]()

    if type_name == "array":
        items = definition.get("items")
        if items is None:
            return ArraySchema()
        return ArraySchema(items=compile_node(items, f"{path}.items"))

    if type_name == "object":
        properties = definition.get("properties", {})
        if not isinstance(properties, Mapping):
            raise SchemaError(f"'properties' at {path} must be an object")
        required = definition.get("required", [])
        if not isinstance(required, (list, tuple)) or not all(
            isinstance(name, str) for name in required
        ):
            raise SchemaError(f"'required' at {path} must be a list of strings")
        compiled = tuple(
            (name, compile_node(sub, f"{path}.{name}"))
            for name, sub in properties.items()
        )
        return ObjectSchema(properties=compiled, required=tuple(required))

    raise SchemaError(f"Unsupported schema type at {path}: {type_name!r}")


class CompiledValidator:
    """Validator for one compiled object schema."""

    def __init__(self, schema: ObjectSchema):
        self.schema = schema

    def validate(self, candidate: Any) -> ValidationResult:
        if not isinstance(candidate, Mapping):
            return ValidationResult(
                valid=False,
                errors=(
                    FieldError(
                        field=None,
                        message="not an object",
                        expected="object",
                        actual=json_type_name(candidate),
                    ),
                ),
            )
        errors: List[FieldError] = []
        self._check_object(self.schema, candidate, None, errors)
        return ValidationResult(valid=not errors, errors=tuple(errors))

    def _check_object(
        self,
        schema: ObjectSchema,
        candidate: Mapping,
        prefix: Optional[str],
        errors: List[FieldError],
    ) -> None:
        declared = set()
        for name, node in schema.properties:
            declared.add(name)
            path = f"{prefix}.{name}" if prefix else name
            if name not in candidate:
                if name in schema.required:
                    errors.append(FieldError(field=path, message=f"'{path}' is required"))
                continue
            self._check_value(node, candidate[name], path, errors)

        for name in schema.required:
            if name in declared or name in candidate:
                continue
            declared.add(name)
            path = f"{prefix}.{name}" if prefix else name
            errors.append(FieldError(field=path, message=f"'{path}' is required"))

    def _check_value(
        self, node: SchemaNode, value: Any, path: str, errors: List[FieldError]
    ) -> None:
        if not _matches(node, value):
            expected = schema_type_name(node)
            actual = json_type_name(value)
            errors.append(
                FieldError(
                    field=path,
                    message=f"'{path}' must be {expected}, got {actual}",
                    expected=expected,
                    actual=actual,
                )
            )
            return

        if isinstance(node, ObjectSchema):
            self._check_object(node, value, path, errors)
        elif isinstance(node, ArraySchema) and not isinstance(node.items, AnySchema):
            for index, item in enumerate(value):
                self._check_value(node.items, item, f"{path}[{index}]", errors)


def compile_schema(definition: Mapping[str, Any]) -> CompiledValidator:
    """Compile a tool parameter schema.

    The top-level schema must describe an object; tool parameters are always
    passed as a JSON object.

    Raises:
        SchemaError: if the definition is malformed or not an object schema.
    """
    node = compile_node(definition)
    if not isinstance(node, ObjectSchema):
        raise SchemaError(
            f"Tool parameter schema must be an object schema, got {schema_type_name(node)}"
        )
    return CompiledValidator(node)
