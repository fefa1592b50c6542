"""Output path templating and ffmpeg option tokenizing.

Placeholders in an output pattern:

- ``{{ext}}``    extension of the input file, without the dot
- ``{{name}}``   file name without extension
- ``{{dir}}``    parent directory of the input, exactly as it was given
- ``{{parent}}`` last segment of the parent directory

Example: ``/destination/{{dir}}/{{name}}_transcoded.{{ext}}`` writes into
/destination, mirrors the source structure and keeps name and extension while
appending ``_transcoded`` to the name.
"""

import os
import re
from pathlib import PurePath
from typing import Dict, List, Optional, Union

from ffzap.domain.errors import OutputPathError

PLACEHOLDER_RE = re.compile(r"\{\{(ext|name|dir|parent)\}\}")


def _split_name(path: str):
    name = PurePath(path).name
    if name in ("", ".", ".."):
        raise OutputPathError(f"{path} has no file name")
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        raise OutputPathError(f"{path} has no file extension")
    return stem, ext


def placeholder_values(path: Union[str, PurePath]) -> Dict[str, str]:
    path = str(path)
    stem, ext = _split_name(path)
    directory = os.path.dirname(path)
    parent = os.path.basename(directory.rstrip("/\\")) if directory else ""
    if parent in (".", ".."):
        parent = ""
    return {"ext": ext, "name": stem, "dir": directory, "parent": parent}


def build_output_path(path: Union[str, PurePath], output_pattern: str) -> str:
    """Resolves the pattern for one input path.

    Every placeholder is substituted in a single pass, so placeholder text that
    appears inside a file or directory name is never expanded again.
    """
    values = placeholder_values(path)
    return PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], output_pattern)


def split_options(ffmpeg_options: Optional[str]) -> List[str]:
    """Splits the raw option string on single spaces.

    Quoting is not honored: ``-metadata title="a b"`` becomes three arguments.
    """
    if not ffmpeg_options:
        return []
    return ffmpeg_options.split(" ")
