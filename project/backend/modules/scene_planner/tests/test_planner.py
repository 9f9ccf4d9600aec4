"""
Tests for scene planning.
"""

import pytest
from unittest.mock import AsyncMock, patch

from shared.errors import UpstreamAIError, ValidationError
from modules.scene_planner import build_user_message, plan_scenes

PLAN = {
    "title": "Morning Coffee",
    "scenes": [
        {"text": "Wake up.", "visuals": "Sunrise over a city", "style": "calm", "duration": 4},
        {"text": "Brew.", "visuals": "Pour-over close-up", "style": "warm"},
        {"text": "Go!", "visuals": "Runner with a cup", "style": "energetic", "duration": "fast"},
    ]
}


def test_build_user_message_script():
    assert build_user_message("script", "Hello.").startswith("Split this script into scenes")


def test_build_user_message_prompt():
    assert "for this prompt" in build_user_message("prompt", "coffee")


@pytest.mark.asyncio
async def test_plan_scenes_requires_input():
    with pytest.raises(ValidationError) as exc_info:
        await plan_scenes(prompt="", script="")
    assert "Either prompt or script is required" in str(exc_info.value)


@pytest.mark.asyncio
async def test_plan_scenes_rejects_both():
    with pytest.raises(ValidationError):
        await plan_scenes(prompt="coffee", script="Wake up. Brew.")


@pytest.mark.asyncio
async def test_plan_scenes_from_prompt():
    with patch("modules.scene_planner.planner.complete_json", new=AsyncMock(return_value=PLAN)) as mock_llm:
        result = await plan_scenes(prompt="A morning coffee routine")

    assert result.title == "Morning Coffee"
    assert [scene.duration for scene in result.scenes] == [4, 5, 5]
    assert [scene.text for scene in result.scenes] == ["Wake up.", "Brew.", "Go!"]
    assert "A morning coffee routine" in mock_llm.await_args.args[1]


@pytest.mark.asyncio
async def test_plan_scenes_from_script_uses_split_instruction():
    with patch("modules.scene_planner.planner.complete_json", new=AsyncMock(return_value=PLAN)) as mock_llm:
        await plan_scenes(script="Wake up. Brew. Go!")

    assert mock_llm.await_args.args[1].startswith("Split this script into scenes")


@pytest.mark.asyncio
async def test_plan_scenes_infinite_duration_uses_default():
    plan = {"title": "Launch", "scenes": [
        {"text": "Go!", "visuals": "Rocket", "style": "bold", "duration": float("inf")},
    ]}

    with patch("modules.scene_planner.planner.complete_json", new=AsyncMock(return_value=plan)):
        result = await plan_scenes(prompt="rocket launch")

    assert result.scenes[0].duration == 5


@pytest.mark.asyncio
async def test_plan_scenes_malformed_output():
    with patch("modules.scene_planner.planner.complete_json", new=AsyncMock(return_value={"title": "x"})):
        with pytest.raises(UpstreamAIError) as exc_info:
            await plan_scenes(prompt="coffee")

    assert exc_info.value.kind == UpstreamAIError.MALFORMED
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_plan_scenes_empty_scene_list_is_malformed():
    with patch("modules.scene_planner.planner.complete_json", new=AsyncMock(return_value={"title": "x", "scenes": []})):
        with pytest.raises(UpstreamAIError):
            await plan_scenes(prompt="coffee")
