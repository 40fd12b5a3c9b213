import yaml
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "gedcom_graph.yml"

DEFAULTS = {
    "paths": {"logs_dir": "logs"},
    "logging": {"level": "INFO", "to_file": False},
    "parser": {"strict_header": False},
    "debug": False,
}


class GGConfig:
    def __init__(self, data):
        self.paths = data.get("paths", DEFAULTS["paths"])
        self.logging = data.get("logging", DEFAULTS["logging"])
        self.parser = data.get("parser", DEFAULTS["parser"])
        self.debug = data.get("debug", False)

    @property
    def strict_header(self) -> bool:
        return bool(self.parser.get("strict_header", False))


def load_config(path: Path = CONFIG_PATH) -> 'GGConfig':
    # An installed package has no config/ directory next to it.
    if not path.exists():
        return GGConfig(DEFAULTS)

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return GGConfig(data)

_config_cache = None

def get_config() -> 'GGConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache
