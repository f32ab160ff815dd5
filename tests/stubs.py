from typing import Any, Dict, List, Tuple

from learnix.schemas.common import ApiResponse

UPSTREAM_DOWN = ApiResponse(success=False, message="upstream down")


class StubApi:
    """Stands in for ApiClient; replies are looked up by path."""

    def __init__(self, replies: Dict[str, Any] | None = None):
        self.replies = replies or {}
        self.calls: List[Tuple[str, str, Any]] = []

    async def get(self, path, token=None, params=None):
        self.calls.append(("GET", path, params))
        return self._reply(path)

    async def post(self, path, body=None, token=None):
        self.calls.append(("POST", path, body))
        return self._reply(path)

    async def put(self, path, body=None, token=None):
        self.calls.append(("PUT", path, body))
        return self._reply(path)

    async def delete(self, path, token=None):
        self.calls.append(("DELETE", path, None))
        return self._reply(path)

    def _reply(self, path):
        reply = self.replies.get(path, UPSTREAM_DOWN)
        if isinstance(reply, BaseException):
            raise reply
        return reply


def ok(data=None) -> ApiResponse:
    return ApiResponse(success=True, data=data)
