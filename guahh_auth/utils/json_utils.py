"""Reading and writing the JSON files the host keeps on disk."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any, TypeVar, cast

from yarl import URL

from guahh_auth.config import JsonType


_JSON_T = TypeVar("_JSON_T", bound=Mapping[Any, Any])


def json_minify(data: JsonType | list[JsonType]) -> str:
    """Compact JSON text, as stored in the session record."""
    return json.dumps(data, separators=(',', ':'))


def _serialize(obj: Any) -> Any:
    # URLs and sets end up in settings, e.g. trusted origins
    if isinstance(obj, URL):
        return str(obj)
    elif isinstance(obj, set):
        return sorted(obj)
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def merge_json(obj: JsonType, template: Mapping[Any, Any]) -> None:
    """
    Make `obj` follow the shape of `template`, in place.

    Keys the template doesn't know are dropped, values of the wrong type are
    replaced with the template's, and missing keys are filled in.
    Nested objects are handled the same way.
    """
    for key in list(obj):
        if key not in template:
            del obj[key]
            continue
        value, default = obj[key], template[key]
        if type(value) is not type(default):
            obj[key] = deepcopy(default)
        elif isinstance(value, dict):
            merge_json(value, default)
    for key, default in template.items():
        obj.setdefault(key, deepcopy(default))


def json_load(path: Path, defaults: _JSON_T, *, merge: bool = True) -> _JSON_T:
    """
    Read a JSON file, falling back to a copy of `defaults` if it doesn't exist.

    With `merge`, the file's contents are shaped after `defaults` through
    `merge_json`. Without it, they're returned as stored.
    """
    if not path.exists():
        return cast(_JSON_T, deepcopy(dict(defaults)))
    with open(path, encoding="utf8") as file:
        contents: JsonType = json.load(file)
    if merge:
        merge_json(contents, defaults)
    return cast(_JSON_T, contents)


def json_save(path: Path, contents: Mapping[Any, Any], *, sort: bool = False) -> None:
    """
    Write `contents` to `path` as indented JSON.

    The document goes to a temporary file next to the target first and is then
    moved over it, so readers only ever see a complete file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding="utf8") as file:
            json.dump(contents, file, default=_serialize, sort_keys=sort, indent=4)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
