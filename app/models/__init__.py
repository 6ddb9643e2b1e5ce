from app.models.profile import Profile
from app.models.message import Message
from app.models.follow import Follow
from app.models.post import Post

__all__ = [
	"Profile",
	"Message",
	"Follow",
	"Post",
]
