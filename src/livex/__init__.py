"""livex: lifetime-aware observable values for Python."""

from importlib.metadata import version as _version

__version__ = _version("livex")

from livex.errors import InvalidRegistration
from livex.lifetime import FOREVER, Lifetime, LifetimeListener, LifetimeState, ManualLifetime
from livex.live_data import LiveData, MutableLiveData, Observer
from livex.poster import (
    AsyncioPoster,
    DeferredPoster,
    SchedulerPoster,
    SynchronousPoster,
    get_default_poster,
    set_default_poster,
)
from livex.event import Event, consume
from livex.view_model import ViewModel
# textual NOT auto-imported, opt-in only

__all__ = [
    "LiveData",
    "MutableLiveData",
    "Observer",
    "InvalidRegistration",
    "Lifetime",
    "LifetimeListener",
    "LifetimeState",
    "ManualLifetime",
    "FOREVER",
    "DeferredPoster",
    "SynchronousPoster",
    "SchedulerPoster",
    "AsyncioPoster",
    "set_default_poster",
    "get_default_poster",
    "Event",
    "consume",
    "ViewModel",
]
