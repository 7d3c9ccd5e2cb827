"""`intern-daily config`: print the merged settings or edit one config file."""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from intern_daily.config import (
    find_repo_root,
    global_config_path,
    load_config,
    load_json_object,
    project_config_path,
    save_config,
)


def _lookup(data: dict[str, Any], dotted: str) -> Any:
    node: Any = data
    for part in dotted.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def _assign(data: dict[str, Any], dotted: str, value: Any) -> None:
    """Set data[a][b][c] for 'a.b.c', replacing non-dict intermediates."""
    *parents, leaf = dotted.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value


def _coerce(raw: str) -> Any:
    """JSON literal if it parses (50, false, null, "x"), otherwise the bare string."""
    text = raw.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _target(path: Path, use_global: bool) -> tuple[Path, str, Path | None]:
    repo_root = find_repo_root(path)
    if use_global or repo_root is None:
        return global_config_path(), "global", repo_root
    return project_config_path(repo_root), f"project ({repo_root.as_posix()})", repo_root


def _apply_set(target: Path, label: str, assignment: str) -> None:
    key, sep, raw = assignment.partition("=")
    key = key.strip()
    if not sep:
        _fail("--set requires KEY=VALUE (e.g. timezone=Asia/Shanghai).")
    if not key:
        _fail("empty key in KEY=VALUE.")
    value = _coerce(raw)
    data = load_json_object(target) or {}
    _assign(data, key, value)
    save_config(target, data)
    print(f"Set {key} = {json.dumps(value, ensure_ascii=False)} in {label} config.")


def _apply_list_edit(target: Path, label: str, pair: list[str], adding: bool) -> None:
    key, item = pair[0].strip(), pair[1].strip()
    if not key:
        _fail(f"empty key in --{'add' if adding else 'remove'} KEY VALUE.")
    data = load_json_object(target) or {}
    items = _lookup(data, key)
    items = list(items) if isinstance(items, list) else []
    if adding:
        items.append(item)
        message = f"Added {json.dumps(item)} to {key}"
    else:
        items = [x for x in items if x != item]
        message = f"Removed {json.dumps(item)} from {key}"
    _assign(data, key, items)
    save_config(target, data)
    print(f"{message} in {label} config.")


def _show(repo_root: Path | None) -> None:
    layers = "defaults + global"
    if repo_root is not None:
        layers += f" + project ({repo_root.as_posix()})"
    print(f"# Config: {layers}")
    print(json.dumps(load_config(repo_root), indent=2, ensure_ascii=False))


def run(args: Namespace) -> None:
    """Edits go to the project file inside a repository, else (or with --global) to the global one."""
    show = getattr(args, "show", False)
    assignment = getattr(args, "set_key", None)
    to_add = getattr(args, "add_key", None)
    to_remove = getattr(args, "remove_key", None)
    if not (show or assignment or to_add or to_remove):
        _fail("specify --show, --set KEY=VALUE, --add KEY VALUE, or --remove KEY VALUE.")

    target, label, repo_root = _target(
        Path(getattr(args, "path", None) or "."), getattr(args, "global_", False)
    )
    if assignment:
        _apply_set(target, label, assignment)
    if to_add:
        _apply_list_edit(target, label, to_add, adding=True)
    if to_remove:
        _apply_list_edit(target, label, to_remove, adding=False)
    if show:
        _show(repo_root)
