"""Deno binary names, release URLs and file layout constants."""

DENO_BINARY_NAME = "deno"
DENO_VERSION_FILE = "version.txt"
DENO_VERSION_RANGE = "^1.17.2"
DENO_VERSION_PATTERN = r"^deno ([\d.]+)"

# Cache location under the user cache dir
CACHE_APP_NAME = "deno-bridge"
CACHE_SUBDIR = "deno-cli"

# GitHub API URL structure
GITHUB_API_BASE = "https://api.github.com"
GITHUB_REPOS_PATH = "repos"
RELEASES_PATH = "releases"
DENO_OWNER = "denoland"
DENO_REPO = "deno"
RELEASES_PER_PAGE = 100

DOWNLOAD_URL_TEMPLATE = (
    "https://github.com/{owner}/{repo}/releases/download/v{version}/deno-{target}.zip"
)

MANIFEST_FILE = "manifest.json"
