import uuid
from urllib.parse import parse_qs


def get_profile_id(query_string: str):
    values = parse_qs(query_string).get("profile")
    if not values:
        return None
    try:
        return uuid.UUID(values[0])
    except ValueError:
        return None


class ProfileContextMiddleware:
    """
    Puts the viewer's profile id from ``?profile=<uuid>`` into
    ``scope["profile_id"]``. Profile selection itself happens elsewhere; the
    playback session only needs the id to key progress writes.
    """

    def __init__(self, inner):
        self.inner = inner

    async def __call__(self, scope, receive, send):
        query_string = scope.get("query_string", b"").decode()
        scope = dict(scope, profile_id=get_profile_id(query_string))
        return await self.inner(scope, receive, send)
