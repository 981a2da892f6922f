# Package initialization for tagshelf.
# This file intentionally contains only minimal metadata.
# All functional code lives in submodules to keep imports explicit and predictable.

__all__ = [
    "__version__",
]

# Package version.
# This is duplicated in pyproject.toml; keep them in sync.
__version__ = "0.1.0"
