"""Boundary Protocols — contracts between core and the persistence collaborator.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - save() receives rounds already normalized (contiguous idx from 0, clamped made)
    - save(None, ...) creates; save(id, ...) updates and fails for unknown ids

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the shell awaits them around
      the pure core logic
"""

from typing import Protocol

from smartshooter.core.domain_types import SessionId, UserId
from smartshooter.core.session_types import SessionDraft, SessionRecord


class SessionRepository(Protocol):
    """Contract for session persistence — implemented by shell."""
    async def load(self, user_id: UserId) -> list[SessionRecord]: ...
    async def get(self, session_id: SessionId) -> SessionRecord | None: ...
    async def save(
        self, session_id: SessionId | None, user_id: UserId, draft: SessionDraft,
    ) -> SessionId: ...
    async def delete(self, session_id: SessionId) -> None: ...
