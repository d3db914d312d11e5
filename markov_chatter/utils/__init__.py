from .logger_utils import Log, log
from .config_manager import Config
from .metrics_tracker import Metrics
from .threaded_runner import run_keyed, run_parallel

__all__ = ["Log", "log", "Config", "Metrics", "run_parallel", "run_keyed"]
