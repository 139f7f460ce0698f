import json
import os
import re

CONFIG_PATH = "config.json"

DEFAULT_CONFIG = {"map_path": "", "mapping_dir": ""}

JAR_PATTERN = re.compile(r'at ([\w\-\.]+\.jar)/')


def load_config(path=CONFIG_PATH):
    if os.path.exists(path):
        with open(path) as f:
            return {**DEFAULT_CONFIG, **json.load(f)}
    return dict(DEFAULT_CONFIG)


def save_config(conf, path=CONFIG_PATH):
    with open(path, "w") as f:
        json.dump(conf, f)


def find_jar_name_from_stacktrace(text):
    """
    Find the first .jar name in the stacktrace (after 'at' or in brackets).
    """
    for line in text.splitlines():
        match = JAR_PATTERN.search(line)
        if match:
            return match.group(1)
    return None


def find_map_file_by_jar(jar_name, search_dir):
    """
    Find the mapping of a jar under search_dir: `<jar base>.map` anywhere
    (top directory first), otherwise the first .map file containing the jar base name.
    """
    if not jar_name or not search_dir:
        return None
    base = os.path.splitext(jar_name)[0]
    map_name = base + ".map"
    partial = None
    for root_dir, dirs, files in os.walk(search_dir):
        dirs.sort()
        if map_name in files:
            return os.path.join(root_dir, map_name)
        if partial is None:
            partial = next((os.path.join(root_dir, f) for f in sorted(files)
                            if f.endswith(".map") and base in f), None)
    if partial:
        print(f"No {map_name} in {search_dir}, using {partial}")
    return partial
