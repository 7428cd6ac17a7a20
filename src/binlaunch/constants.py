"""Release naming conventions and transfer defaults."""

# GitHub release URL structure
GITHUB_BASE_URL = "https://github.com"
RELEASES_PATH = "releases"
DOWNLOAD_PATH = "download"

ARCHIVE_EXTENSION = "tar.gz"

# URL schemes that must name a host
HOSTED_SCHEMES = ("http", "https")

# Archives are expected to wrap everything in a single top-level folder
DEFAULT_STRIP_COMPONENTS = 1

CHUNK_SIZE = 64 * 1024

BIN_DIRNAME = "bin"

# platform.system() value -> release platform prefix
OS_PREFIXES = {
    "Windows": "windows",
    "Windows_NT": "windows",
    "Linux": "linux",
    "Darwin": "darwin",
}
