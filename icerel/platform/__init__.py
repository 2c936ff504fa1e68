"""Process and filesystem helpers."""

from .files import append_text, atomic_write_text, copy_files, sha256_file
from .process import ProcessError, run, run_streaming

__all__ = [
    # files
    "append_text",
    "atomic_write_text",
    "copy_files",
    "sha256_file",
    # process
    "ProcessError",
    "run",
    "run_streaming",
]
