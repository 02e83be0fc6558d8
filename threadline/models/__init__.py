"""
SQLModel table models.

Importing this package registers every table on SQLModel.metadata.
"""

from threadline.models.comment import Comments
from threadline.models.post import Posts
from threadline.models.saved_post import SavedPosts
from threadline.models.subreddit import Subreddits
from threadline.models.vote import Votes

__all__ = [
    "Subreddits",
    "Posts",
    "Comments",
    "Votes",
    "SavedPosts",
]
