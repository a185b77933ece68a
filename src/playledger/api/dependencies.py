from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from playledger.app import LedgerServices


def get_services(request: Request) -> LedgerServices:
    return request.app.state.services


Services = Annotated[LedgerServices, Depends(get_services)]
