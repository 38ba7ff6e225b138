"""Tests for scenario content models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from storycompass.models import Branch, CompassChange, ContentBundle, Scenario, Scene


class TestAliases:
    """Content-file spellings are accepted."""

    def test_branch_text_and_next_scene(self) -> None:
        branch = Branch.model_validate({"text": "Run", "next_scene": "s2"})

        assert branch.choice == "Run"
        assert branch.next_scene_id == "s2"

    def test_scene_type_alias_lowercased(self) -> None:
        scene = Scene.model_validate({"id": "s1", "type": "Roll"})

        assert scene.scene_type == "roll"

    def test_unknown_scene_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Scene.model_validate({"id": "s1", "type": "cutscene"})

    def test_bundle_scenarios_alias(self) -> None:
        bundle = ContentBundle.model_validate({"id": "b", "scenarios": ["a", "b"]})

        assert bundle.scenario_ids == ("a", "b")


class TestSceneReferences:
    """Blank scene references mean "no scene"."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_next_scene_is_terminal(self, value: str | None) -> None:
        branch = Branch(choice="End", next_scene_id=value)

        assert branch.next_scene_id is None
        assert branch.is_terminal

    def test_scene_is_terminal(self) -> None:
        assert Scene(id="end").is_terminal
        assert not Scene(id="s", next_scene_id="end").is_terminal

    def test_display_name_falls_back_to_id(self) -> None:
        assert Scene(id="s1").display_name == "s1"
        assert Scene(id="s1", title="Gate").display_name == "Gate"

    def test_empty_scene_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Scene(id="")


class TestScenario:
    """Scenario helpers."""

    def test_root_defaults_to_first_scene(self) -> None:
        scenario = Scenario(id="x", scenes=[Scene(id="a"), Scene(id="b")])

        assert scenario.root_scene_id == "a"
        assert scenario.start_scene is not None
        assert scenario.start_scene.id == "a"

    def test_start_scene_alias(self) -> None:
        scenario = Scenario.model_validate(
            {"id": "x", "start_scene": "b", "scenes": [{"id": "a"}, {"id": "b"}]}
        )

        assert scenario.root_scene_id == "b"

    def test_empty_scenario_has_no_root(self) -> None:
        assert Scenario(id="x").root_scene_id is None

    def test_declared_axes_case_insensitive(self) -> None:
        scenario = Scenario(
            id="x",
            scenes=[
                Scene(
                    id="a",
                    branches=[
                        Branch(compass_change=CompassChange(axis=" Courage ", delta=1)),
                        Branch(compass_change=CompassChange(axis="courage", delta=2)),
                        Branch(compass_change=CompassChange(axis="Wisdom", delta=3)),
                    ],
                )
            ],
        )

        assert scenario.declared_axes() == ["Courage", "Wisdom"]

    def test_models_are_frozen(self) -> None:
        scene = Scene(id="a")

        with pytest.raises(ValidationError):
            scene.title = "changed"  # type: ignore[misc]
