from __future__ import annotations

from datetime import datetime

from vidshare.schemas.common import CamelModel
from vidshare.schemas.user import UserPublic


class SubscriptionToggleResponse(CamelModel):
    subscribed: bool


class SubscribedChannelItem(CamelModel):
    channel: UserPublic
    subscribed_at: datetime
