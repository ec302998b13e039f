# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Any, Optional, Union


class FacilitatorError(Exception):
    pass


class KoraRpcError(FacilitatorError):
    """A failed call against the Kora JSON-RPC backend.

    ``status`` is the HTTP status for transport-level failures or the JSON-RPC
    ``error.code`` for protocol-level ones; ``None`` when no response was
    received. ``body`` keeps whatever Kora returned (parsed JSON or raw text).
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[Union[int, str]] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body


class KoraConfigError(KoraRpcError):
    pass


class InvalidRequestError(FacilitatorError, ValueError):
    pass


class ForbiddenError(FacilitatorError):
    def __init__(self, message: str = "forbidden") -> None:
        super().__init__(message)
        self.message = message


class PayloadTooLargeError(FacilitatorError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"payload too large (limit {limit} bytes)")
        self.limit = limit
