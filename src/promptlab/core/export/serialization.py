"""Wire mapping between the composition dataclasses and camelCase JSON dicts.

Exported files and MCP payloads use the camelCase keys of the web builder
(``basePrompt``, ``vsEnhancement``, ``frameworkConfig`` ...). Plain records are
mapped field by field through :func:`to_wire` / :func:`from_wire`; records whose
wire shape differs from the dataclass shape have explicit converters.
"""

from __future__ import annotations

import types
import typing
from dataclasses import MISSING, fields, is_dataclass
from typing import Any, Literal, Union

from promptlab.core.composition.advanced import AdvancedEnhancements
from promptlab.core.composition.enhancements import EnhancementConfig
from promptlab.core.composition.models import (
    AnalyticalConfig,
    BasePromptConfig,
    ChainOfThoughtConfig,
    ComparativeConfig,
    ConstraintBasedConfig,
    ExecutionResult,
    FewShotConfig,
    FrameworkConfig,
    GeneratedPrompt,
    IterativeConfig,
    PromptTemplate,
    RoleBasedConfig,
    TemplateFillInConfig,
    TransformationConfig,
    VSConfig,
    VSResponse,
    framework_config_from_dict,
)

# Field names whose wire key is not the plain camelCase of the field name.
_WIRE_ALIASES: dict[type, dict[str, str]] = {
    EnhancementConfig: {
        "role": "roleEnhancement",
        "reasoning": "reasoningScaffolds",
        "conversation": "conversationFlow",
    },
    AdvancedEnhancements: {
        "role": "roleEnhancement",
        "constraints": "smartConstraints",
        "reasoning": "reasoningScaffold",
        "conversation": "conversationFlow",
    },
}


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _wire_key(cls: type, name: str) -> str:
    return _WIRE_ALIASES.get(cls, {}).get(name, camel_case(name))


def to_wire(obj: Any) -> Any:
    """Recursively convert dataclasses into camelCase dicts."""
    if is_dataclass(obj) and not isinstance(obj, type):
        cls = type(obj)
        return {_wire_key(cls, f.name): to_wire(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, list):
        return [to_wire(item) for item in obj]
    if isinstance(obj, dict):
        return {key: to_wire(value) for key, value in obj.items()}
    return obj


_TYPE_NAMES: dict[type, str] = {str: "a string", bool: "a boolean", int: "an integer"}


def _checked(hint: Any, value: Any, where: str) -> Any:
    """Return ``value`` if it matches ``hint``; raise ValueError naming ``where`` if not.

    Integers are accepted (and converted) for float fields; booleans are
    never accepted as numbers.
    """
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if hint is Any:
        return value
    if origin is Literal:
        if value not in args:
            allowed = ", ".join(repr(a) for a in args)
            raise ValueError(f"{where} must be one of {allowed}, got {value!r}")
        return value
    if origin is Union or origin is types.UnionType:
        if value is None and type(None) in args:
            return None
        options = [a for a in args if a is not type(None)]
        if len(options) == 1:
            return _checked(options[0], value, where)
        for option in options:
            try:
                return _checked(option, value, where)
            except ValueError:
                continue
        raise ValueError(f"{where} has an unsupported value {value!r}")
    if origin is list:
        if not isinstance(value, list):
            raise ValueError(f"{where} must be a list, got {type(value).__name__}")
        item = args[0] if args else Any
        return [_checked(item, v, f"{where}[{i}]") for i, v in enumerate(value)]
    if origin is dict:
        if not isinstance(value, dict):
            raise ValueError(f"{where} must be an object, got {type(value).__name__}")
        key_hint, value_hint = args or (Any, Any)
        return {
            _checked(key_hint, k, where): _checked(value_hint, v, f"{where}.{k}")
            for k, v in value.items()
        }
    if isinstance(hint, type) and is_dataclass(hint):
        if not isinstance(value, dict):
            raise ValueError(f"{where} must be an object, got {type(value).__name__}")
        return from_wire(hint, value, where)

    if hint is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{where} must be a number, got {value!r}")
        return float(value)
    if hint is int and isinstance(value, bool):
        raise ValueError(f"{where} must be an integer, got {value!r}")
    if isinstance(hint, type) and not isinstance(value, hint):
        raise ValueError(f"{where} must be {_TYPE_NAMES.get(hint, hint.__name__)}, got {value!r}")
    return value


def from_wire(cls: type, data: dict[str, Any] | None, path: str = "") -> Any:
    """Build ``cls`` from a camelCase (or snake_case) dict.

    Missing and null keys fall back to the field default; unknown keys are
    ignored. Every other value is checked against the field's annotation,
    nested dataclass fields recursively.

    Raises:
        ValueError: For a missing required field or a value of the wrong
            type, naming the offending key (e.g. ``vsEnhancement.enabled``).
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{path or cls.__name__} must be an object, got {type(data).__name__}")
    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        key = _wire_key(cls, f.name)
        value = data.get(key)
        if value is None:
            key = f.name
            value = data.get(f.name)
        if value is None:
            continue
        where = f"{path}.{key}" if path else key
        kwargs[f.name] = _checked(hints.get(f.name, Any), value, where)
    missing = [
        f.name
        for f in fields(cls)
        if f.name not in kwargs and f.default is MISSING and f.default_factory is MISSING
    ]
    if missing:
        raise ValueError(f"{cls.__name__} is missing required fields: {', '.join(missing)}")
    return cls(**kwargs)


# ---------------------------------------------------------------------------
# Framework config
# ---------------------------------------------------------------------------

def framework_config_to_dict(config: FrameworkConfig | None) -> dict[str, Any]:
    """Render a framework variant with the builder's flat ``frameworkConfig`` keys."""
    if isinstance(config, RoleBasedConfig):
        return {"roleBasedRole": config.role}
    if isinstance(config, FewShotConfig):
        return {"fewShotExamples": [{"input": e.input, "output": e.output} for e in config.examples]}
    if isinstance(config, ChainOfThoughtConfig):
        out: dict[str, Any] = {}
        if config.reasoning_structure:
            out["reasoningStructure"] = config.reasoning_structure
        if config.custom_reasoning_structure:
            out["customReasoningStructure"] = config.custom_reasoning_structure
        return out
    if isinstance(config, TemplateFillInConfig):
        return {"templateVariables": dict(config.variables)}
    if isinstance(config, ConstraintBasedConfig):
        return {"constraintSpecs": list(config.constraints)}
    if isinstance(config, IterativeConfig):
        return {"conversationContext": config.conversation_context}
    if isinstance(config, ComparativeConfig):
        return {"comparisonCriteria": list(config.criteria)}
    if isinstance(config, AnalyticalConfig):
        return {"analysisDepth": config.analysis_depth} if config.analysis_depth else {}
    if isinstance(config, TransformationConfig):
        return {"sourceFormat": config.source_format, "targetFormat": config.target_format}
    return {}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def base_config_to_dict(config: BasePromptConfig) -> dict[str, Any]:
    return {
        "domain": config.domain,
        "framework": config.framework or "",
        "basePrompt": config.base_prompt,
        "targetOutcome": config.target_outcome,
        "frameworkConfig": framework_config_to_dict(config.framework_config),
    }


def _text(data: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValueError(f"baseConfig.{key} must be a string, got {value!r}")
        if value:
            return value
    return ""


def base_config_from_dict(data: dict[str, Any]) -> BasePromptConfig:
    """Raises ValueError for an unknown framework name or a mistyped field."""
    if not isinstance(data, dict):
        raise ValueError(f"baseConfig must be an object, got {type(data).__name__}")
    framework = _text(data, "framework")
    framework_config = (
        framework_config_from_dict(framework, data.get("frameworkConfig")) if framework else None
    )
    return BasePromptConfig(
        base_prompt=_text(data, "basePrompt", "base_prompt"),
        domain=_text(data, "domain"),
        target_outcome=_text(data, "targetOutcome", "target_outcome"),
        framework_config=framework_config,
    )


def vs_config_to_dict(vs: VSConfig) -> dict[str, Any]:
    return to_wire(vs)


def vs_config_from_dict(data: dict[str, Any] | None) -> VSConfig:
    return from_wire(VSConfig, data, "vsEnhancement")


def enhancements_to_dict(enhancements: EnhancementConfig) -> dict[str, Any]:
    return to_wire(enhancements)


def enhancements_from_dict(data: dict[str, Any] | None) -> EnhancementConfig:
    return from_wire(EnhancementConfig, data, "enhancements")


def advanced_enhancements_to_dict(enhancements: AdvancedEnhancements) -> dict[str, Any]:
    return to_wire(enhancements)


def advanced_enhancements_from_dict(data: dict[str, Any] | None) -> AdvancedEnhancements:
    return from_wire(AdvancedEnhancements, data, "advancedEnhancements")


def generated_prompt_to_dict(prompt: GeneratedPrompt) -> dict[str, Any]:
    return to_wire(prompt)


def generated_prompt_from_dict(data: dict[str, Any]) -> GeneratedPrompt:
    return from_wire(GeneratedPrompt, data)


def execution_result_to_dict(result: ExecutionResult) -> dict[str, Any]:
    return to_wire(result)


def execution_result_from_dict(data: dict[str, Any]) -> ExecutionResult:
    return from_wire(ExecutionResult, data, "executionResult")


def vs_response_to_dict(response: VSResponse) -> dict[str, Any]:
    return to_wire(response)


def template_to_dict(template: PromptTemplate) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "config": base_config_to_dict(template.config),
        "vsEnhancement": vs_config_to_dict(template.vs_enhancement),
        "createdAt": template.created_at,
        "updatedAt": template.updated_at,
        "tags": list(template.tags),
    }
    if template.enhancements is not None:
        out["enhancements"] = enhancements_to_dict(template.enhancements)
    return out


def template_from_dict(data: dict[str, Any]) -> PromptTemplate:
    """Raises KeyError for missing required keys and ValueError for bad framework names."""
    enhancements = data.get("enhancements")
    return PromptTemplate(
        id=data["id"],
        name=data["name"],
        description=data.get("description") or "",
        config=base_config_from_dict(data["config"]),
        vs_enhancement=vs_config_from_dict(data["vsEnhancement"]),
        created_at=data["createdAt"],
        updated_at=data.get("updatedAt") or data["createdAt"],
        enhancements=enhancements_from_dict(enhancements) if enhancements else None,
        tags=[str(t) for t in data.get("tags") or []],
    )
