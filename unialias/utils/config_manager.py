# config_manager.py - JSON settings file

import json
import os

from unialias.utils.logger_utils import Log

DEFAULTS = {
    "dataset_dir": "",  # empty = bundled datasets
    "max_matches": 5,
    "log_file": "unialias.log",
    "color": True,
    "metrics_file": "",  # empty = timings kept in memory only
}


def app_home() -> str:
    """Settings/log directory: $UNIALIAS_HOME, else ~/.unialias"""
    return os.environ.get("UNIALIAS_HOME") or os.path.join(os.path.expanduser("~"), ".unialias")


def _coerce(default, val):
    if isinstance(default, bool) and isinstance(val, str):
        low = val.strip().lower()
        if low in ("1", "true", "yes", "on"):
            return True
        if low in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"not a boolean: {val!r}")
    return type(default)(val)


class Config:
    def __init__(self, path=None):
        self.path = path or os.path.join(app_home(), "settings.json")
        self.data = dict(DEFAULTS)
        self._load()

    def _load(self):
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            Log.warning(f"[Config] could not read {self.path}, using defaults: {e}")
            return
        if not isinstance(loaded, dict):
            Log.warning(f"[Config] {self.path} is not a JSON object, using defaults")
            return
        for key, val in loaded.items():
            if key not in DEFAULTS:
                Log.warning(f"[Config] ignoring unknown option {key!r}")
                continue
            try:
                self.data[key] = _coerce(DEFAULTS[key], val)
            except (TypeError, ValueError):
                Log.warning(f"[Config] bad value for {key!r}: {val!r}, keeping default")

    def save(self):
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def get(self, key):
        return self.data[key]

    def show(self):
        return "\n".join(f"{k:15} = {v}" for k, v in self.data.items())

    def set(self, key, val):
        """Set and persist one option; raises KeyError/ValueError for bad input."""
        if key not in self.data:
            raise KeyError(f"No such option: {key}")
        self.data[key] = _coerce(DEFAULTS[key], val)
        self.save()

    def _home_file(self, key):
        """Option naming a file; relative names live beside settings.json."""
        name = self.data[key]
        if not name:
            return None
        if os.path.isabs(name):
            return name
        return os.path.join(os.path.dirname(self.path), name)

    @property
    def log_path(self):
        return self._home_file("log_file")

    @property
    def metrics_path(self):
        return self._home_file("metrics_file")
