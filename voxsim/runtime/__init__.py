from .dirs import RunDir, register_run
from .logging import reset_logging, switch_log_file
