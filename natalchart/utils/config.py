# natalchart/utils/config.py
import os
import json
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = str(Path(__file__).resolve().parents[1] / "config" / "defaults.yaml")


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.aspects and cfg['aspects'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def _load_json_if(path):
    if not path or not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f) or {}

def load_config(path: str | None = None):
    """
    Load YAML config from `path` (default: NATAL_CONFIG or natalchart/config/defaults.yaml)
    and merge optional overrides from env vars:
      - NATAL_ASPECT_ORBS  path to a JSON object {aspect_name: orb_deg}
    Returns an AttrDict for convenient access.
    """
    path = path or os.getenv("NATAL_CONFIG") or DEFAULT_CONFIG_PATH
    if path == DEFAULT_CONFIG_PATH and not os.path.exists(path):
        # Built-in orbs and timezone range cover an absent defaults file
        data = {}
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    orbs_path = os.getenv("NATAL_ASPECT_ORBS")
    if orbs_path:
        aspects = data.setdefault("aspects", {}) or {}
        aspects.setdefault("orbs", {})
        aspects["orbs"] = {**(aspects["orbs"] or {}), **_load_json_if(orbs_path)}
        data["aspects"] = aspects

    return _to_attr(data)

def aspect_orbs(cfg) -> dict:
    """Orb overrides from a loaded config ({} when absent)."""
    aspects = (cfg or {}).get("aspects") or {}
    return dict(aspects.get("orbs") or {})

def timezone_choices(cfg) -> list:
    """'UTC-12' … 'UTC+12' as offered to clients."""
    tz = (cfg or {}).get("timezones") or {}
    lo = int(tz.get("min_offset_hours", -12))
    hi = int(tz.get("max_offset_hours", 12))
    return [f"UTC{n:+d}" for n in range(lo, hi + 1)]
