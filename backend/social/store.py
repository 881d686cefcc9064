from __future__ import annotations

import datetime as dt

from .models import Post, User


def utc_day_bounds(day: dt.date) -> tuple[dt.datetime, dt.datetime]:
    start = dt.datetime.combine(day, dt.time.min, tzinfo=dt.timezone.utc)
    return start, start + dt.timedelta(days=1)


class DatabasePostHistory:
    """Quota view of the user/post tables.

    Days are UTC calendar days regardless of ``TIME_ZONE``; ``created_at__date``
    would use the current Django time zone instead.
    """

    def friend_count(self, username: str) -> int:
        return User.objects.get(username=username).friends.count()

    def posts_on_date(self, username: str, day: dt.date) -> int:
        start, end = utc_day_bounds(day)
        return Post.objects.filter(
            author__username=username,
            created_at__gte=start,
            created_at__lt=end,
        ).count()
