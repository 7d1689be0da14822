from .generate_video import VideoClipResult, VideoGenerator
from .operation_poller import OperationPoller

__all__ = ["VideoClipResult", "VideoGenerator", "OperationPoller"]
