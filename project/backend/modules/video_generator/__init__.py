"""
Video Generator Module.

Render jobs on the video-diffusion provider (per-scene submission, status
checks, blocking waits for the single-shot flows) and per-scene still
frames with narration prompts.
"""

from modules.video_generator.scene_video import (
    build_scene_prompt,
    check_prediction,
    frame_count,
    request_scene_video,
    FRAMES_PER_SECOND,
    MAX_FRAMES,
)
from modules.video_generator.scene_frame import (
    build_audio_prompt,
    build_frame_prompt,
    render_scene_frame,
)
from modules.video_generator.replicate_client import (
    create_prediction,
    get_prediction,
    wait_for_prediction,
)

__all__ = [
    "build_audio_prompt",
    "build_frame_prompt",
    "render_scene_frame",
    "build_scene_prompt",
    "check_prediction",
    "frame_count",
    "request_scene_video",
    "FRAMES_PER_SECOND",
    "MAX_FRAMES",
    "create_prediction",
    "get_prediction",
    "wait_for_prediction",
]
