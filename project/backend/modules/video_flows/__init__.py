"""
Video Flows Module.

Single-shot generators that block on the render provider until the video
is ready: prompt-to-video, explainer, UGC, and style cloning.
"""

from modules.video_flows.prompt_video import generate_prompt_video
from modules.video_flows.explainer import create_explainer_video
from modules.video_flows.ugc import generate_ugc_video
from modules.video_flows.clone_style import clone_video_style

__all__ = [
    "generate_prompt_video",
    "create_explainer_video",
    "generate_ugc_video",
    "clone_video_style",
]
