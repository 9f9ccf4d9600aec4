"""
Request bodies for the generation handlers.

Fields are optional at the schema level; handlers check required fields
themselves so that a missing field is a 400 with a readable message.
"""

from typing import Any, Dict, List, Optional

from shared.models.scene import CamelModel


class ScrapeWebsiteRequest(CamelModel):
    url: Optional[str] = None
    project_id: Optional[str] = None


class GenerateScenesRequest(CamelModel):
    prompt: Optional[str] = None
    script: Optional[str] = None


class GenerateSceneVideoRequest(CamelModel):
    scene: Optional[Dict[str, Any]] = None
    scene_index: int = 0


class CheckVideoStatusRequest(CamelModel):
    prediction_id: Optional[str] = None


class PromptVideoRequest(CamelModel):
    prompt: Optional[str] = None
    style: Optional[str] = None
    music: Optional[str] = None
    project_id: Optional[str] = None
    voice_style: Optional[str] = None


class ExplainerVideoRequest(CamelModel):
    script: Optional[str] = None
    animation_style: Optional[str] = None
    voiceover_style: Optional[str] = None
    project_id: Optional[str] = None
    custom_narration_url: Optional[str] = None
    include_music: bool = False


class UGCVideoRequest(CamelModel):
    character_type: Optional[str] = None
    script: Optional[str] = None
    voice_style: Optional[str] = None
    project_id: Optional[str] = None
    brand_color: Optional[str] = None
    logo_url: Optional[str] = None
    include_watermark: bool = False


class CloneVideoStyleRequest(CamelModel):
    sample_video_url: Optional[str] = None
    content_text: Optional[str] = None
    project_id: Optional[str] = None
    logo_url: Optional[str] = None
    clip_url: Optional[str] = None
    resolution: str = "1080p"
    aspect_ratio: str = "16:9"


class VoiceoverRequest(CamelModel):
    text: Optional[str] = None
    voice_style: Optional[str] = None
    project_id: Optional[str] = None


class SceneBatchRequest(CamelModel):
    scenes: Optional[List[Dict[str, Any]]] = None
    title: Optional[str] = None
