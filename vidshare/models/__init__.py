from vidshare.models.comment import Comment
from vidshare.models.like import Like, LikeTarget
from vidshare.models.playlist import Playlist, PlaylistVideo
from vidshare.models.subscription import Subscription
from vidshare.models.tweet import Tweet
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.models.watch_history import WatchHistoryEntry

__all__ = [
    "User",
    "Video",
    "Comment",
    "Like",
    "LikeTarget",
    "Subscription",
    "Playlist",
    "PlaylistVideo",
    "Tweet",
    "WatchHistoryEntry",
]
