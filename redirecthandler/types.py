from collections.abc import Callable
from datetime import datetime
from typing import Any


# Source of "now" injected into record mutations
type Clock = Callable[[], datetime]

# Raw Redis hash of a persisted redirect
type RedirectHash = dict[str, str]

type AppConfig = dict[str, Any]
