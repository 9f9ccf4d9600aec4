"""
Scene Planner Module.

Breaks a prompt or script into ordered video scenes.
"""

from modules.scene_planner.planner import plan_scenes, build_user_message, SYSTEM_PROMPT

__all__ = [
    "plan_scenes",
    "build_user_message",
    "SYSTEM_PROMPT",
]
