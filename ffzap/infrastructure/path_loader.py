import os
from pathlib import Path
from typing import Iterable, List
from ffzap.domain.errors import FileListError


def load_file_list(file_list: Path) -> List[str]:
    """Reads one path per line. Blank lines are dropped, entries are trimmed."""
    try:
        contents = Path(file_list).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileListError(file_list, f"No file found at {file_list}.") from exc
    except IsADirectoryError as exc:
        raise FileListError(file_list, f"The path {file_list} is a directory.") from exc
    except PermissionError as exc:
        raise FileListError(file_list, f"Permission denied when reading file {file_list}.") from exc
    except UnicodeDecodeError as exc:
        raise FileListError(
            file_list,
            f"The contents of {file_list} contain invalid data. Please make sure it is encoded as UTF-8.",
        ) from exc
    except OSError as exc:
        raise FileListError(
            file_list, f"An error has occurred reading the file at path {file_list}: {exc}."
        ) from exc

    return [line.strip() for line in contents.splitlines() if line.strip()]


def _walk_files(root_dir: Path) -> Iterable[str]:
    """Recursively yields regular files below root_dir.

    Symlinks are neither followed nor returned.
    """
    for root, dirs, files in os.walk(str(root_dir), followlinks=False):
        root_path = Path(root)
        dirs[:] = sorted(d for d in dirs if not (root_path / d).is_symlink())
        for file_name in sorted(files):
            file_path = root_path / file_name
            if file_path.is_symlink() or not file_path.is_file():
                continue
            yield str(file_path)


def expand_inputs(inputs: Iterable[str]) -> List[str]:
    """Expands directories into the files they contain.

    Files are kept as given. Entries that are neither a file nor a directory
    are kept too, so the processor reports them as skipped instead of them
    silently disappearing.
    """
    paths: List[str] = []
    for entry in inputs:
        path = Path(entry)
        if path.is_dir() and not path.is_symlink():
            paths.extend(_walk_files(path))
        else:
            paths.append(entry)
    return paths
