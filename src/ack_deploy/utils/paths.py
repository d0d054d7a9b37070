from pathlib import Path

PROJECT_MARKER = "artisan"


def get_project_root(start: Path | None = None) -> Path:
    """Get the Laravel project root directory.

    Walks up from ``start`` (the working directory by default) looking for
    the ``artisan`` script.

    Returns:
        Path to the project root, or ``start`` itself if none is found
    """
    current = (start or Path.cwd()).resolve()

    for parent in [current, *current.parents]:
        if (parent / PROJECT_MARKER).exists():
            return parent

    return current
