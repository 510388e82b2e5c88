"""Resource path resolution for configuration files shipped with the project.

Typical usage:
    from pohperf.core.resource_path import get_config_path

    settings_path = get_config_path("settings.yaml")
"""

from pathlib import Path


def get_project_root() -> Path:
    """Get the project root directory.

    Returns:
        Path to the project root (src/pohperf/core -> project root).

    Examples:
        >>> get_project_root()
        PosixPath('/Users/user/dev/pohperf')
    """
    return Path(__file__).parent.parent.parent.parent


def get_resource_path(relative_path: str) -> Path:
    """Get absolute path to a resource relative to the project root.

    Examples:
        >>> str(get_resource_path("config/logging.yaml"))
        '/Users/user/dev/pohperf/config/logging.yaml'
    """
    return get_project_root() / relative_path


def get_config_path(config_file: str) -> Path:
    """Get path to a configuration file under config/.

    Args:
        config_file: Config filename (e.g. "settings.yaml")
    """
    return get_resource_path(f"config/{config_file}")
