import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from vget.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CAPTURE_TIMEOUT = 15.0
DEFAULT_NAVIGATION_TIMEOUT = 30.0
DEFAULT_PROBE_TIMEOUT = 5.0

def default_config_dir() -> Path:
    return Path.home() / ".config" / "vget"

def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value

@dataclass(frozen=True)
class Site:
    """A site that needs browser-driven extraction.

    `type` is the media extension being hunted (without the dot), `match`
    the domain fragment it was configured for.
    """
    type: str
    match: str = ""

    @property
    def target_suffix(self) -> str:
        return "." + self.type.lower().lstrip(".")

@dataclass
class Settings:
    config_dir: Path = field(default_factory=default_config_dir)
    browser_path: Optional[str] = None
    proxy: Optional[str] = None
    capture_timeout: float = DEFAULT_CAPTURE_TIMEOUT
    navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    sites_file: Path = field(default_factory=lambda: Path.cwd() / "sites.json")

    @property
    def profile_dir(self) -> Path:
        """Persistent browser profile, shared by every extraction call."""
        return self.config_dir / "browser"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """
        Build settings from the environment.

        A `.env` file (the given one, or the first found from the current
        directory) is loaded first; variables already set in the
        environment take priority over it.
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(override=False)

        config_dir = os.environ.get("VGET_CONFIG_DIR", "").strip()
        sites_file = os.environ.get("VGET_SITES_FILE", "").strip()
        browser_path = os.environ.get("VGET_BROWSER_PATH", "").strip() or None
        proxy = (os.environ.get("HTTPS_PROXY", "").strip()
                 or os.environ.get("HTTP_PROXY", "").strip()
                 or None)

        return cls(
            config_dir=Path(config_dir).expanduser() if config_dir else default_config_dir(),
            browser_path=browser_path,
            proxy=proxy,
            capture_timeout=_env_float("VGET_CAPTURE_TIMEOUT", DEFAULT_CAPTURE_TIMEOUT),
            navigation_timeout=_env_float("VGET_NAVIGATION_TIMEOUT", DEFAULT_NAVIGATION_TIMEOUT),
            probe_timeout=_env_float("VGET_PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT),
            sites_file=Path(sites_file).expanduser() if sites_file else Path.cwd() / "sites.json",
        )

def load_sites(path: Path) -> List[Site]:
    """
    Read the sites file.

    Format: {"sites": [{"match": "example.com", "type": "m3u8"}, ...]}
    A missing file means no site needs the browser.
    """
    path = Path(path)
    if not path.exists():
        return []

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read sites file {path}: {e}") from e

    entries = data.get("sites", []) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigError(f"Sites file {path} must contain a 'sites' list")

    sites = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"Sites file {path}: entry {i} is not an object")
        match = str(entry.get("match", "")).strip().lower()
        media_type = str(entry.get("type", "")).strip().lower().lstrip(".")
        if not match or not media_type:
            raise ConfigError(f"Sites file {path}: entry {i} needs both 'match' and 'type'")
        sites.append(Site(type=media_type, match=match))

    logger.debug(f"Loaded {len(sites)} site(s) from {path}")
    return sites

def find_site(sites: List[Site], url: str) -> Optional[Site]:
    """Return the first configured site whose domain fragment appears in the URL host."""
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return None
    if not host:
        return None
    for site in sites:
        if site.match and site.match in host:
            return site
    return None
