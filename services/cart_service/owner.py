from dataclasses import dataclass
from typing import Optional

from shared.errors import InvalidRequestError


@dataclass(frozen=True)
class OwnerKey:
    """Identifies whose cart a row belongs to: a signed-in user or an anonymous session."""

    user_id: Optional[int] = None
    session_id: Optional[str] = None

    @classmethod
    def resolve(cls, user_id: Optional[int] = None, session_id: Optional[str] = None) -> "OwnerKey":
        # An authenticated user always wins over the anonymous session
        if user_id is not None:
            return cls(user_id=user_id)
        if session_id:
            return cls(session_id=session_id)
        raise InvalidRequestError("Either userId or sessionId is required")

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def as_params(self) -> dict:
        if self.user_id is not None:
            return {"userId": self.user_id}
        return {"sessionId": self.session_id}
