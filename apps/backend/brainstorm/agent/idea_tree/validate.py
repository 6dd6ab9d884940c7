from __future__ import annotations

import logging
from typing import Any, Iterator, Type, TypeVar

from pydantic import BaseModel, ValidationError

from brainstorm.config import MATERIALIZE_MAX_DEPTH
from brainstorm.services.errors import ShapeValidationError, StructuralDepthError
from .schema import (
    IdeaNode,
    IdeaTreeResponse,
    OpinionsResponse,
    QuestionsResponse,
    RoleThought,
    as_list,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _format_loc(loc: tuple[Any, ...], prefix: str = "") -> str:
    path = prefix
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def _model_validate(schema: Type[T], value: Any, *, prefix: str = "") -> T:
    try:
        return schema.model_validate(value)
    except ValidationError as exc:
        first = exc.errors()[0]
        path = _format_loc(tuple(first.get("loc") or ()), prefix)
        raise ShapeValidationError(path, first.get("input"), first.get("msg")) from exc


def _walk_raw_forest(value: Any, path: str) -> Iterator[tuple[Any, str, int]]:
    stack = [(node, f"{path}[{i}]", 1) for i, node in enumerate(as_list(value))]
    stack.reverse()
    while stack:
        node, node_path, level = stack.pop()
        yield node, node_path, level
        if isinstance(node, dict):
            children = as_list(node.get("children"))
            for i in range(len(children) - 1, -1, -1):
                stack.append((children[i], f"{node_path}.children[{i}]", level + 1))


def check_forest_depth(value: Any, *, max_depth: int = MATERIALIZE_MAX_DEPTH, path: str = "root") -> None:
    """Reject a raw forest with more than ``max_depth`` tiers.

    Runs before model validation so an adversarially deep tree never reaches
    recursive parsing.
    """
    for node, node_path, level in _walk_raw_forest(value, path):
        if level > max_depth:
            raise StructuralDepthError(node_path, node, f"tree deeper than {max_depth} levels")


def _check_unique_ids(forest: list[IdeaNode], path: str) -> None:
    seen: set[str] = set()
    stack = [(node, f"{path}[{i}]") for i, node in enumerate(forest)]
    stack.reverse()
    while stack:
        node, node_path = stack.pop()
        if node.id in seen:
            raise ShapeValidationError(f"{node_path}.id", node.id, "duplicate id in tree")
        seen.add(node.id)
        for i in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[i], f"{node_path}.children[{i}]"))


def validate_idea_tree(value: Any, *, max_depth: int = MATERIALIZE_MAX_DEPTH) -> IdeaTreeResponse:
    """Validate a decoded brainstorming response (``<output><tree>…``)."""
    root_path = "output.tree.root"
    raw_root = None
    if isinstance(value, dict):
        output = value.get("output")
        if isinstance(output, dict):
            tree = output.get("tree")
            if isinstance(tree, dict):
                raw_root = tree.get("root")
    if raw_root is not None:
        check_forest_depth(raw_root, max_depth=max_depth, path=root_path)

    response = _model_validate(IdeaTreeResponse, value)
    _check_unique_ids(response.output.tree.root, root_path)
    logger.debug("Validated idea tree with %d root sections", len(response.output.tree.root))
    return response


def _unwrap_output(value: Any, key: str) -> tuple[Any, str]:
    if isinstance(value, dict) and key not in value and isinstance(value.get("output"), dict):
        return value["output"], "output"
    return value, ""


def validate_opinions(value: Any) -> list[RoleThought]:
    """Validate ``<opinions><opinion>…`` optionally wrapped in ``<output>``."""
    inner, prefix = _unwrap_output(value, "opinions")
    return _model_validate(OpinionsResponse, inner, prefix=prefix).opinions.opinion


def validate_questions(value: Any) -> list[RoleThought]:
    """Validate ``<questions><question>…`` optionally wrapped in ``<output>``."""
    inner, prefix = _unwrap_output(value, "questions")
    return _model_validate(QuestionsResponse, inner, prefix=prefix).questions.question
