from __future__ import annotations

import threading
from typing import Optional

from ..core.exceptions import OperationCancelledError


def check_cancelled(cancel: Optional[threading.Event], operation: str) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError(f"{operation} was cancelled")
