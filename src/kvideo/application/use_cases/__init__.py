from .video_detail import VideoDetailUseCase
from .video_search import VideoSearchUseCase

__all__ = ["VideoDetailUseCase", "VideoSearchUseCase"]
