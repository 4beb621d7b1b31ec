# (C) 2025, 2026 Rodrigo Rodrigues da Silva <rodrigo@flowlexi.com>
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pydantic envelopes for CLI output."""

from typing import Literal
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error envelope for a rejected declaration."""
    ok: Literal[False] = False
    code: str
    error: str
    type: str | None = None
    field: str | None = None
    attribute: str | None = None


class CheckedType(BaseModel):
    """One successfully built collection."""
    collection: str
    fields: int
    default_sorting_field: str | None = None


class CheckResponse(BaseModel):
    """Envelope for `fastsearch check`."""
    ok: Literal[True] = True
    types: list[CheckedType]
