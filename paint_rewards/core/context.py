"""
paint_rewards/core/context.py

Request-scoped context passed explicitly into core and repository calls.

Who is acting, in which region and with which locale is resolved once per
request (see security.build_request_context) instead of being read from
process-wide state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

CONTRACTOR = "contractor"
VALIDATOR = "validator"
ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class RequestContext:
    actor_type: str = ANONYMOUS
    actor_id: Optional[int] = None
    region_code: Optional[str] = None
    sub_region_code: Optional[str] = None
    locale: str = "es"

    @property
    def is_contractor(self) -> bool:
        return self.actor_type == CONTRACTOR and self.actor_id is not None

    @property
    def is_validator(self) -> bool:
        return self.actor_type == VALIDATOR and self.actor_id is not None

    @property
    def is_region_scoped(self) -> bool:
        return bool(self.region_code)
