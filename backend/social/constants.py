"""Project-level constants shared by validation, quota policy and the API.

Keep limits here so forms, views and the quota hint endpoint stay consistent.
"""

# Maximum caption length of a post
POST_TEXT_MAX_LENGTH = 2000

# Maximum comment length
COMMENT_TEXT_MAX_LENGTH = 1000

# Upload size limit for post media
MAX_UPLOAD_SIZE_MB = 50

# Accepted content types for post media (by prefix)
ALLOWED_MEDIA_PREFIXES = ("image/", "video/")

# Friend-count thresholds of the daily posting quota
SINGLE_POST_FRIENDS = 1
PLATEAU_DAILY_POSTS = 2
UNLIMITED_FRIENDS_ABOVE = 10
