__version__ = "0.1.0"

__all__ = [
    # Names
    "generate_name",
    "NAME_PATTERN",
    # Settings
    "Settings",
    "Deployment",
    "load_deployment",
    # Chain
    "ChainClient",
    "RpcClient",
    "RpcError",
    # Submission
    "TaskSubmitter",
    "TaskReceipt",
    "Scheduler",
    "SchedulerState",
    "SchedulerStats",
    # Errors
    "TrappistError",
    "ConfigError",
    "CredentialError",
    "SubmitError",
    "SubmissionError",
    "ConfirmationError",
]

from .errors import (
    ConfigError,
    ConfirmationError,
    CredentialError,
    SubmissionError,
    SubmitError,
    TrappistError,
)
from .names import NAME_PATTERN, generate_name
from .config import Settings
from .deployment import Deployment, load_deployment
from .chain.client import ChainClient
from .chain.rpc import RpcClient, RpcError
from .submitter import TaskReceipt, TaskSubmitter
from .scheduler import Scheduler, SchedulerState, SchedulerStats
