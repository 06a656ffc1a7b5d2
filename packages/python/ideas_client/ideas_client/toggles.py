"""Vote and follow toggles.

A toggle holds the on/off state for one idea and flips it only after the
server confirms the change. Failures go to the ``notify`` callback (the
toast) and leave the state untouched; nothing is retried.
"""

from __future__ import annotations

from typing import Callable, Optional

from loguru import logger

from .client import IdeasClient
from .errors import ApiError

Notifier = Callable[[str], None]


def _log_notifier(message: str) -> None:
    logger.warning(message)


class Toggle:
    action = "update"

    def __init__(
        self,
        client: IdeasClient,
        idea_id: str,
        active: bool = False,
        *,
        notify: Optional[Notifier] = None,
    ):
        self.client = client
        self.idea_id = idea_id
        self.active = active
        self.notify = notify or _log_notifier
        self.pending = False

    async def _activate(self) -> None:
        raise NotImplementedError

    async def _deactivate(self) -> None:
        raise NotImplementedError

    async def toggle(self) -> bool:
        """Flip the state; returns the state afterwards."""

        if self.pending:
            return self.active
        self.pending = True
        try:
            if self.active:
                await self._deactivate()
            else:
                await self._activate()
        except ApiError as exc:
            self.notify(f"Failed to {self.action}: {exc.message}")
        finally:
            self.pending = False
        return self.active


class VoteToggle(Toggle):
    """Vote button with the displayed vote count."""

    action = "update vote"

    def __init__(self, client: IdeasClient, idea_id: str, active: bool = False, count: int = 0, **kwargs):
        super().__init__(client, idea_id, active, **kwargs)
        self.count = count

    async def _activate(self) -> None:
        result = await self.client.vote(self.idea_id)
        self.active, self.count = result.voted, result.idea.votes

    async def _deactivate(self) -> None:
        result = await self.client.unvote(self.idea_id)
        self.active, self.count = result.voted, result.idea.votes


class FollowToggle(Toggle):
    action = "update follow"

    async def _activate(self) -> None:
        self.active = (await self.client.follow(self.idea_id)).followed

    async def _deactivate(self) -> None:
        self.active = (await self.client.unfollow(self.idea_id)).followed
