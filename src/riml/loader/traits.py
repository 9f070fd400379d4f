"""Trait registry for ``!define`` / ``!use``.

A trait is a mapping registered under a name. Using it copies every
field the using mapping does not already have, then fills the trait's
``.placeholders`` from the using mapping's ``.vars``.

A placeholder maps a variable name to one or more ``|``-delimited paths.
The path is walked from the merged mapping; if it reaches a string
before its last segment, the last segment is the text to replace in that
string, otherwise it is the field name to assign::

    !define
    .trait: notFound
    responseCodes:
      404:
        description: "No such {{THING}}"
    .placeholders:
      thing: "responseCodes|404|description|{{THING}}"
"""

import copy
import logging
from typing import Any

from riml.errors import (
    PlaceholderPathError,
    TraitDefinitionError,
    TraitNotFoundError,
    UnfulfilledVariableError,
)
from riml.model.props import (
    PLACEHOLDER_SEPARATOR,
    PLACEHOLDERS_KEY,
    TRAIT_KEY,
    TRAITS_KEY,
    VARS_KEY,
)

logger = logging.getLogger(__name__)


class TraitRegistry:
    """Named trait fragments of one document."""

    def __init__(self, traits: dict[str, dict] | None = None):
        self.traits = traits if traits is not None else {}

    def define(self, data: dict) -> None:
        """Register ``data`` under its ``.trait`` name. The tag site evaluates to nothing."""
        if TRAIT_KEY not in data:
            raise TraitDefinitionError(f"!define mapping has no {TRAIT_KEY} name")
        name = str(data.pop(TRAIT_KEY))
        logger.debug(f"Defining trait: {name}")
        self.traits[name] = data

    def use(self, data: dict) -> dict:
        """Apply every trait named in ``data['.traits']`` to ``data`` and return it."""
        if TRAITS_KEY not in data:
            return data
        names = data.pop(TRAITS_KEY)
        if isinstance(names, str):
            names = [names]
        for name in names or []:
            self._apply(data, str(name))
        data.pop(VARS_KEY, None)
        return data

    def _apply(self, data: dict, name: str) -> None:
        if name not in self.traits:
            raise TraitNotFoundError(name)
        logger.debug(f"Applying trait: {name}")
        trait = copy.deepcopy(self.traits[name])
        placeholders = trait.pop(PLACEHOLDERS_KEY, None) or {}

        consumed: dict[str, bool] = {}
        for field, value in trait.items():
            if field == VARS_KEY:
                _merge_vars(data, value)
            elif field in data:
                consumed[field] = False
            else:
                data[field] = value
                consumed[field] = True

        variables = data.get(VARS_KEY) or {}
        for varname, pathspecs in placeholders.items():
            if varname not in variables:
                raise UnfulfilledVariableError(varname, name)
            if isinstance(pathspecs, str):
                pathspecs = [pathspecs]
            for pathspec in pathspecs:
                _substitute(data, pathspec, variables[varname], consumed)


def _merge_vars(data: dict, trait_vars: Any) -> None:
    if not isinstance(trait_vars, dict):
        return
    if VARS_KEY not in data or not isinstance(data[VARS_KEY], dict):
        data[VARS_KEY] = trait_vars
        return
    for varname, value in trait_vars.items():
        data[VARS_KEY].setdefault(varname, value)


def _substitute(data: dict, pathspec: str, value: Any, consumed: dict[str, bool]) -> None:
    """Write ``value`` at ``pathspec`` inside ``data``."""
    segments = pathspec.strip(PLACEHOLDER_SEPARATOR).split(PLACEHOLDER_SEPARATOR)
    if consumed.get(segments[0]) is False:
        # The using mapping kept its own value for this field.
        return

    last = segments.pop()
    target = data
    text_key = None
    for segment in segments:
        key = _find_key(target, segment)
        if key is None:
            raise PlaceholderPathError(pathspec, segment)
        if isinstance(target[key], str):
            text_key = key
            break
        if isinstance(target[key], dict):
            target = target[key]
        else:
            raise PlaceholderPathError(pathspec, segment)

    if text_key is not None:
        target[text_key] = target[text_key].replace(last, str(value))
    else:
        key = _find_key(target, last)
        target[last if key is None else key] = value


def _find_key(mapping: dict, segment: str) -> Any:
    """Return the key of ``mapping`` named by ``segment``; integer keys match their digits."""
    if segment in mapping:
        return segment
    if segment.lstrip("-").isdigit() and int(segment) in mapping:
        return int(segment)
    return None
