"""
AwardBoard Backend - Request-Scoped Award Context
===================================================

What:  The per-request state threaded through the award pipeline.
How:   The pipeline middleware builds one AwardContext per request and stores
       it on `request.state.award`; route handlers reach it through the
       `get_award_context` dependency.

Outcome:
    Pending           no stage has claimed the request yet
    Terminal(code)    a stage settled the award code

    settle() is first-match-wins: once the outcome is Terminal, later calls
    are ignored. abort() is the one exception and is reserved for
    unexpected failures, which always answer 500.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from starlette.requests import Request
from starlette.responses import Response

from awardboard.services.auth_service import Identity

logger = logging.getLogger(__name__)


class Pending:
    def __repr__(self) -> str:
        return "Pending"


@dataclass(frozen=True)
class Terminal:
    code: int


PENDING = Pending()
Outcome = Union[Pending, Terminal]


def request_target(request: Request) -> str:
    """Raw path plus query string, as sent on the request line."""
    raw_path = request.scope.get("raw_path")
    # Some servers and test transports leave the query on raw_path
    path = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


def serialize_headers(request: Request) -> str:
    """
    Header block as compact JSON, lower-cased names, repeated headers
    joined with ", ".
    """
    merged: Dict[str, str] = {}
    for name, value in request.headers.items():
        merged[name] = f"{merged[name]}, {value}" if name in merged else value
    return json.dumps(merged, separators=(",", ":"), ensure_ascii=False)


@dataclass
class AwardContext:
    method: str
    path: str
    target: str
    serialized_headers: str = "{}"
    body: bytes = b""
    identity: Optional[Identity] = None
    outcome: Outcome = PENDING
    deferred: bool = False
    response_headers: Dict[str, str] = field(default_factory=dict)
    clear_session_cookie: bool = False

    @classmethod
    def from_request(cls, request: Request, body: bytes = b"") -> "AwardContext":
        return cls(
            method=request.method.upper(),
            path=request.url.path,
            target=request_target(request),
            serialized_headers=serialize_headers(request),
            body=body,
        )

    @property
    def is_terminal(self) -> bool:
        return isinstance(self.outcome, Terminal)

    @property
    def code(self) -> Optional[int]:
        return self.outcome.code if isinstance(self.outcome, Terminal) else None

    @property
    def username(self) -> Optional[str]:
        return self.identity.username if self.identity else None

    def settle(self, code: int) -> Outcome:
        if isinstance(self.outcome, Terminal):
            if self.outcome.code != code:
                logger.debug(
                    "Award %d ignored for %s %s; already settled at %d",
                    code,
                    self.method,
                    self.path,
                    self.outcome.code,
                )
            return self.outcome
        self.outcome = Terminal(code)
        return self.outcome

    def abort(self, code: int = 500) -> Outcome:
        self.outcome = Terminal(code)
        self.deferred = True
        return self.outcome

    def defer(self, code: Optional[int] = None) -> Response:
        """
        Hand the request back to the pipeline, optionally settling `code`.

        The returned response is a placeholder; the pipeline discards it and
        renders the award page instead.
        """
        if code is not None:
            self.settle(code)
        self.deferred = True
        return Response(status_code=204)

    def sign_in(self, identity: Identity) -> None:
        self.identity = identity
        self.clear_session_cookie = False

    def sign_out(self) -> None:
        self.identity = None
