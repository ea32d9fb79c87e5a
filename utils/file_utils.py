"""
File Utilities Module
Common file operations and path handling functions.
"""

from pathlib import Path
from typing import Union

# Snapshot file extension categories
EXTENSION_GROUPS = {
    'html': {'.html', '.htm'},
    'json': {'.json'},
}


def snapshot_format(path: Union[str, Path]) -> str:
    """
    Return the snapshot format of a file based on its extension.

    Raises:
        ValueError: If the extension is not a known snapshot format
    """
    suffix = Path(path).suffix.lower()
    for category, extensions in EXTENSION_GROUPS.items():
        if suffix in extensions:
            return category
    raise ValueError(f"Unsupported snapshot file type: {path}")


def ensure_directory(directory: Path) -> None:
    """Ensure directory exists, create if necessary."""
    directory.mkdir(parents=True, exist_ok=True)


def read_file_content(file_path: Path) -> str:
    """
    Safely read file content with proper encoding.

    Args:
        file_path: Path to the file to read

    Returns:
        File contents as string

    Raises:
        FileNotFoundError: If file doesn't exist
        IOError: If file can't be read
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError:
        # Fallback to system default encoding if UTF-8 fails
        with open(file_path, 'r') as f:
            return f.read()


def write_file_content(file_path: Path, content: str) -> None:
    """Write text content, creating parent directories as needed."""
    ensure_directory(Path(file_path).parent)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(content)
