"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_groups.py
Reading and writing duplicate-group files.

Format: one group per line, paths joined by a single delimiter character
(space by default, as written by findimagedupes). Blank lines are ignored.
"""
from typing import Iterable, List, Sequence, TextIO


class DuplicateGroupService:
    """Parses and formats the line-based duplicate-group format."""

    @staticmethod
    def read_groups(reader: TextIO, delimiter: str = " ") -> List[List[str]]:
        groups = []
        for line in reader:
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            groups.append([p for p in line.split(delimiter) if p])
        return groups

    @classmethod
    def load(cls, input_file: str, delimiter: str = " ") -> List[List[str]]:
        """Reads groups from a file. Raises OSError if it cannot be opened."""
        with open(input_file, "r", encoding="utf-8") as f:
            return cls.read_groups(f, delimiter)

    @staticmethod
    def format_groups(groups: Iterable[Sequence[str]], delimiter: str = " ") -> str:
        lines = []
        for group in groups:
            for path in group:
                if delimiter in path:
                    raise ValueError(f"Path contains the delimiter {delimiter!r}: {path}")
            lines.append(delimiter.join(group))
        return "".join(line + "\n" for line in lines)

    @classmethod
    def save(cls, output_file: str, groups: Iterable[Sequence[str]], delimiter: str = " ") -> None:
        content = cls.format_groups(groups, delimiter)
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(content)
