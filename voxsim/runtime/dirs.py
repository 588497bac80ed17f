import os
import time
import subprocess
import shutil
import json
import logging
from pathlib import Path


logger = logging.getLogger(__name__)

repo_root = os.getenv("PYTHONPATH", os.getcwd())
results_dirname = "results"
exports_dirname = "exports"


def default_runtime_root() -> Path:
    return Path(repo_root) / results_dirname


def register_run(base_dir_path, script_path, *param_paths, runtime_root=None, with_hash: bool = True):
    """
    Each task run gets a dedicated folder for its log, parameters and figures.
    ---
    base_dir_path: should be a relative path from runtime_root.
    """
    if runtime_root is None:
        runtime_root = default_runtime_root()

    current_time = time.localtime()

    # use the timestamp as id
    run_id = time.strftime("%y%m%d-%H%M%S", current_time)

    git_hash = get_git_hash() if with_hash else None
    if git_hash:
        run_id += f"-{git_hash[:6]}"

    run_dir = RunDir(Path(runtime_root) / base_dir_path / run_id, runtime_root=runtime_root)
    run_dir.setup_directory()

    for each_path in param_paths:
        run_dir.add_parameter_file(each_path)

    metadata = {
        "run_id": run_id,
        "time": time.strftime("%Y-%m-%dT%H:%M:%S", current_time),
        "script": str(os.path.abspath(script_path)),
    }
    if len(param_paths):
        metadata.update({"parameters": [str(os.path.abspath(each_params)) for each_params in param_paths]})
    if git_hash:
        metadata.update({"git_hash": git_hash})
    run_dir.update_metadata(metadata)

    return run_dir


class RunDir:
    """
    Folder of one run. Containers are not kept here but in the shared export
    folder of the runtime root, so that a read task finds what a write task
    exported in an earlier run.
    """

    def __init__(self, path, runtime_root=None):
        self.path = Path(path)
        self.run_id = os.path.basename(self.path)
        self.runtime_root = Path(runtime_root) if runtime_root is not None else default_runtime_root()

    def setup_directory(self):
        self.path.mkdir(parents=True, exist_ok=False)
        self.parameters_dir.mkdir()
        self.visuals_dir.mkdir()
        self.log_file.touch()
        with open(self.metadata_file, "w", encoding="utf-8") as fp:
            json.dump({}, fp)

    @property
    def parameters_dir(self):
        return self.path / "parameters"

    @property
    def visuals_dir(self):
        return self.path / "visuals"

    @property
    def log_file(self):
        return self.path / "log.txt"

    @property
    def metadata_file(self):
        return self.path / "METADATA.json"

    @property
    def exports_dir(self):
        return self.runtime_root / exports_dirname

    def export_path(self, label: str) -> Path:
        """Deterministic location of the container with the given label."""
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        return self.exports_dir / f"{label}.npz"

    def add_parameter_file(self, file_path):
        shutil.copy2(file_path, self.parameters_dir)

    def update_metadata(self, new_info):
        with open(self.metadata_file, "r", encoding="utf-8") as fp:
            metadata = json.load(fp)
        metadata.update(new_info)
        with open(self.metadata_file, "w", encoding="utf-8") as fp:
            json.dump(metadata, fp, indent=2, sort_keys=True)


def get_git_hash():
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL).decode("utf-8").strip()
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"Error getting git hash: {e}")
        return None
