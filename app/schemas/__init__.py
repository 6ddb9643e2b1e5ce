from app.schemas.profile import ProfileSummary, ProfileDto, ViewerDto, MeDto
from app.schemas.message import SendMessageRequest, MessageDto, ThreadDto, ThreadDetailDto
from app.schemas.social import CreatePostRequest, PostDto, FeedItem, FollowResult, FollowStatus

__all__ = [
    "ProfileSummary", "ProfileDto", "ViewerDto", "MeDto",
    "SendMessageRequest", "MessageDto", "ThreadDto", "ThreadDetailDto",
    "CreatePostRequest", "PostDto", "FeedItem", "FollowResult", "FollowStatus",
]
