"""Trait and resource type expansion.

Traits and resource types are templates: ``<<name>>`` placeholders are
filled from the parameters given at the use site plus the reserved
``resourcePath``, ``resourcePathName`` and ``methodName``, then the result
is merged under the declaration that applied it.
"""

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"<<\s*([A-Za-z_][\w-]*)\s*((?:\|\s*!\s*\w+\s*)*)>>")
FUNCTION = re.compile(r"!\s*(\w+)")

# keys that document the template itself and are never copied
TEMPLATE_ONLY_KEYS = {"usage"}


def resource_path_name(resource_path: str) -> str:
    """Rightmost path segment without URI parameters: ``/users/{id}`` -> ``users``."""
    segments = [s for s in resource_path.split("/") if s and "{" not in s]
    return segments[-1] if segments else ""


def references(value: Any) -> list[tuple[str, dict]]:
    """``is``/``type`` values as ``(name, parameters)`` pairs.

    Accepts ``paged``, ``[paged, secured]`` and ``[{paged: {max: 10}}]``.
    """
    if value is None:
        return []
    entries = value if isinstance(value, list) else [value]
    result = []
    for entry in entries:
        if isinstance(entry, str):
            result.append((entry, {}))
        elif isinstance(entry, dict):
            for name, params in entry.items():
                result.append((str(name), params if isinstance(params, dict) else {}))
    return result


def merge(base: Any, override: Any) -> Any:
    """Deep-merge two nodes; values from ``override`` win.

    ``is`` lists are concatenated so traits from both sides apply.
    """
    if isinstance(base, dict) and isinstance(override, dict):
        merged = dict(base)
        for key, value in override.items():
            if key not in base:
                merged[key] = value
            elif key == "is" and isinstance(base[key], list) and isinstance(value, list):
                merged[key] = base[key] + [v for v in value if v not in base[key]]
            else:
                merged[key] = merge(base[key], value)
        return merged
    return base if override is None else override


def expand(template: Any, params: dict[str, Any]) -> dict:
    """A trait or resource type body with its placeholders filled."""
    if not isinstance(template, dict):
        return {}
    body = {key: value for key, value in template.items() if key not in TEMPLATE_ONLY_KEYS}
    return substitute(body, params)


def substitute(value: Any, params: dict[str, Any]) -> Any:
    """Fill ``<<name | !function>>`` placeholders in keys and values."""
    if isinstance(value, str):
        whole = PLACEHOLDER.fullmatch(value.strip())
        if whole and not whole.group(2) and whole.group(1) in params:
            # "maximum: <<max>>" keeps the parameter's YAML type
            return params[whole.group(1)]
        return PLACEHOLDER.sub(lambda match: _fill(match, params), value)
    if isinstance(value, dict):
        return {substitute(key, params): substitute(item, params) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute(item, params) for item in value]
    return value


def _fill(match: re.Match, params: dict[str, Any]) -> str:
    name = match.group(1)
    if name not in params:
        logger.warning("No value for template parameter '%s'", name)
        return match.group(0)
    text = str(params[name])
    for function in FUNCTION.findall(match.group(2)):
        text = transform(text, function)
    return text


def transform(text: str, function: str) -> str:
    """Apply a RAML parameter function such as ``!singularize`` or ``!uppercamelcase``."""
    function = function.lower()
    if function == "singularize":
        return _singularize(text)
    if function == "pluralize":
        return _pluralize(text)
    if function == "uppercase":
        return text.upper()
    if function == "lowercase":
        return text.lower()

    words = _words(text)
    if function == "lowercamelcase":
        return "".join(w.capitalize() if i else w.lower() for i, w in enumerate(words))
    if function == "uppercamelcase":
        return "".join(w.capitalize() for w in words)
    if function == "lowerunderscorecase":
        return "_".join(w.lower() for w in words)
    if function == "upperunderscorecase":
        return "_".join(w.upper() for w in words)
    if function == "lowerhyphencase":
        return "-".join(w.lower() for w in words)
    if function == "upperhyphencase":
        return "-".join(w.upper() for w in words)

    logger.warning("Unknown template function '!%s'", function)
    return text


def _words(text: str) -> list[str]:
    return re.findall(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+", text)


def _singularize(word: str) -> str:
    lower = word.lower()
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if lower.endswith(("sses", "shes", "ches", "xes", "zes")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return word[:-1]
    return word


def _pluralize(word: str) -> str:
    lower = word.lower()
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"
