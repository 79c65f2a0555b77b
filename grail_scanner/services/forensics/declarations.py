"""Gemini function declarations for the forensic tools."""

from typing import Any

from google.genai import types

from grail_scanner.services.forensics.router import TOOL_REGISTRY, ToolSpec


def _to_declaration(spec: ToolSpec) -> types.FunctionDeclaration:
    return types.FunctionDeclaration(
        name=spec.name,
        description=spec.description,
        parameters=types.Schema(
            type=types.Type.OBJECT,
            properties={
                param: types.Schema(type=types.Type.STRING, description=description)
                for param, description in spec.parameters.items()
            },
            required=list(spec.required),
        ),
    )


def build_tool_declarations() -> list[types.FunctionDeclaration]:
    """Declarations for every registered forensic tool, in registry order."""
    return [_to_declaration(spec) for spec in TOOL_REGISTRY.values()]


def build_forensic_tool() -> types.Tool:
    """The ``Tool`` entry attached to the model session."""
    return types.Tool(function_declarations=build_tool_declarations())


def describe_tools() -> list[dict[str, Any]]:
    """JSON-friendly description of the forensic tools."""
    return [
        {
            "name": spec.name,
            "description": spec.description,
            "parameters": dict(spec.parameters),
            "required": list(spec.required),
        }
        for spec in TOOL_REGISTRY.values()
    ]
