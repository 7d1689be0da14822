"""
Operation model - a long-running remote job (video generation).

Veo does not answer generate requests directly: it returns an operation that
has to be re-read until ``done``. The SDK object is kept as an opaque handle
so it can be handed back to the client for the next status check.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Operation:
    """Snapshot of a remote operation's status."""

    handle: Any
    name: Optional[str] = None
    done: bool = False
    error: Optional[str] = None
    media_url: Optional[str] = None
    media_data: Optional[bytes] = None
    media_mime_type: str = "video/mp4"

    @property
    def has_media(self) -> bool:
        return bool(self.media_url or self.media_data)

    @classmethod
    def from_sdk(cls, raw) -> "Operation":
        """Read status, error and output location off a google-genai operation."""
        error = getattr(raw, "error", None)
        if isinstance(error, dict):
            error = error.get("message") or str(error)
        elif error is not None:
            error = getattr(error, "message", None) or str(error)

        media_url = None
        media_data = None
        mime_type = "video/mp4"
        response = getattr(raw, "response", None) or getattr(raw, "result", None)
        videos = getattr(response, "generated_videos", None) if response else None
        if videos:
            video = getattr(videos[0], "video", None)
            if video is not None:
                media_url = getattr(video, "uri", None)
                media_data = getattr(video, "video_bytes", None)
                mime_type = getattr(video, "mime_type", None) or mime_type

        return cls(
            handle=raw,
            name=getattr(raw, "name", None),
            done=bool(getattr(raw, "done", False)),
            error=error,
            media_url=media_url,
            media_data=media_data,
            media_mime_type=mime_type,
        )
