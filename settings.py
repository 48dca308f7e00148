"""
Settings
========

Environment-driven configuration for the content server and the
interactive core. Values come from the process environment, optionally
seeded from a .env file next to this module (or in the main git worktree).

Variables:
    SUPABASE_URL, SUPABASE_ANON_KEY   - content backend credentials
    SESSION_SECRET                    - HMAC key for client-held puzzle sessions
    CONTENT_BACKEND                   - 'supabase' (default) or 'file'
    CONTENT_DIR                       - YAML directory for the file backend
    DEFAULT_LOCALE                    - translation locale for content rows
    BROWSER_SHOW_ALL_WHEN_UNSELECTED  - coloring browser policy (0/1)
    DEFAULT_GRID_SIZE                 - jigsaw grid size when none is given
    STRICT_CONTENT                    - raise on malformed rows instead of skipping
"""

import os
import secrets
import subprocess

from dotenv import load_dotenv

_script_dir = os.path.dirname(os.path.abspath(__file__))


def _find_dotenv():
    """Find .env file: local dir, then main git repo root."""
    local_env = os.path.join(_script_dir, '.env')
    if os.path.isfile(local_env):
        return local_env
    try:
        main_tree = subprocess.check_output(
            ['git', 'worktree', 'list', '--porcelain'],
            cwd=_script_dir, stderr=subprocess.DEVNULL
        ).decode()
    except (OSError, subprocess.CalledProcessError):
        return None
    for line in main_tree.splitlines():
        if line.startswith('worktree '):
            candidate = os.path.join(line.split(' ', 1)[1], '.env')
            if os.path.isfile(candidate):
                return candidate
    return None


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


_env_path = _find_dotenv()
if _env_path:
    load_dotenv(_env_path)
    print(f"Loaded .env from {_env_path}")
else:
    print("[Config] No .env file found — using process environment only")


SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

CONTENT_BACKEND = os.environ.get("CONTENT_BACKEND", "supabase").strip().lower()
CONTENT_DIR = os.environ.get("CONTENT_DIR", os.path.join(_script_dir, "content"))

DEFAULT_LOCALE = os.environ.get("DEFAULT_LOCALE", "en")
FALLBACK_LOCALE = "en"

BROWSER_SHOW_ALL_WHEN_UNSELECTED = _env_flag("BROWSER_SHOW_ALL_WHEN_UNSELECTED")
STRICT_CONTENT = _env_flag("STRICT_CONTENT")

DEFAULT_GRID_SIZE = int(os.environ.get("DEFAULT_GRID_SIZE", "3"))

# Session signing secret: env var, or generated at startup (dev only)
SESSION_SECRET = os.environ.get("SESSION_SECRET", "").encode("utf-8")
if not SESSION_SECRET:
    SESSION_SECRET = secrets.token_bytes(32)
    print("[WARNING] No SESSION_SECRET env var — using random key (sessions won't survive restarts)")
