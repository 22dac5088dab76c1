"""pyhomedash - Async state synchronization core for a home-automation dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhomedash")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhomedash.config import DashboardConfig
from pyhomedash.dashboard import Dashboard
from pyhomedash.errors import ErrorSurface
from pyhomedash.exceptions import (
    HomeDashApiError,
    HomeDashConfigError,
    HomeDashError,
    HomeDashTransportError,
)
from pyhomedash.models import (
    ControlField,
    ControlRecord,
    ControlUpdate,
    SensorSnapshot,
    TimerSetting,
    ViewState,
    derive_timer,
)
from pyhomedash.mutator import ControlMutator
from pyhomedash.poller import Poller
from pyhomedash.remote import RemoteStoreClient
from pyhomedash.state.store import ViewStateStore

__all__ = [
    "__version__",
    "ControlField",
    "ControlMutator",
    "ControlRecord",
    "ControlUpdate",
    "Dashboard",
    "DashboardConfig",
    "ErrorSurface",
    "HomeDashApiError",
    "HomeDashConfigError",
    "HomeDashError",
    "HomeDashTransportError",
    "Poller",
    "RemoteStoreClient",
    "SensorSnapshot",
    "TimerSetting",
    "ViewState",
    "ViewStateStore",
    "derive_timer",
]
