"""
Simulation setup case: write or read one simulation container.

Usage:
    python cases/simulation-setup/script.py config.toml [config2.toml ...]

The task to run is named in the [task] section. Each config file is run in
turn, in its own run folder.
"""

import logging
import os
import sys

from voxsim.config import get_task_name, load_config
from voxsim.runtime import register_run, reset_logging, switch_log_file
from voxsim.tasks import run_task


logger = logging.getLogger(__name__)


def main():
    reset_logging()

    if len(sys.argv) < 2:
        print("Usage: python cases/simulation-setup/script.py config.toml [config2.toml ...]")
        sys.exit(1)

    case_name = os.path.basename(os.path.dirname(os.path.abspath(__file__)))
    failed = False
    for config_file in sys.argv[1:]:
        try:
            config = load_config(config_file)
            run = register_run(os.path.join(case_name, get_task_name(config)), __file__, config_file)
            switch_log_file(run.log_file)
            run_task(config, run)
        except Exception:
            logger.exception(f"Failed to run task of {config_file}.")
            failed = True

    if failed:
        sys.exit(1)


if __name__ == '__main__':
    main()
