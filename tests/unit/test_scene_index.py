"""Tests for the scene transition index."""

from __future__ import annotations

from storycompass.graph.index import build_scene_index
from storycompass.models import Branch, CompassChange, Scenario, Scene


def test_default_next_comes_before_branches() -> None:
    """The default next-scene move is the first transition."""
    scenario = Scenario(
        id="s",
        scenes=[
            Scene(
                id="a",
                next_scene_id="b",
                branches=[Branch(choice="Alt", next_scene_id="c")],
            ),
            Scene(id="b"),
            Scene(id="c"),
        ],
    )

    index = build_scene_index(scenario)
    transitions = index.transitions("a")

    assert [t.target for t in transitions] == ["b", "c"]
    assert transitions[0].is_default is True
    assert transitions[1].label == "Alt"
    assert index.successors("a") == ["b", "c"]


def test_terminal_branch_kept_but_not_an_edge() -> None:
    change = CompassChange(axis="Courage", delta=2)
    scenario = Scenario(
        id="s",
        scenes=[Scene(id="a", branches=[Branch(choice="End", next_scene_id="", compass_change=change)])],
    )

    index = build_scene_index(scenario)

    assert len(index.transitions("a")) == 1
    assert index.transitions("a")[0].is_terminal
    assert index.transitions("a")[0].compass_change == change
    assert index.edges("a") == []


def test_blank_default_next_is_ignored() -> None:
    index = build_scene_index(Scenario(id="s", scenes=[Scene(id="a", next_scene_id="  ")]))

    assert index.transitions("a") == []


def test_duplicates_recorded_first_wins() -> None:
    scenario = Scenario(
        id="s",
        scenes=[
            Scene(id="a", title="First", next_scene_id="b"),
            Scene(id="b"),
            Scene(id="a", title="Second"),
            Scene(id="a", title="Third"),
        ],
    )

    index = build_scene_index(scenario)

    assert index.scene_ids == ["a", "b"]
    assert index.duplicate_ids == ["a"]
    assert index.title_of("a") == "First"
    assert index.successors("a") == ["b"]


def test_dangling_references() -> None:
    scenario = Scenario(
        id="s",
        scenes=[Scene(id="a", branches=[Branch(choice="Go", next_scene_id="x")])],
    )

    dangling = build_scene_index(scenario).dangling_references()

    assert [(t.source, t.target, t.label) for t in dangling] == [("a", "x", "Go")]


def test_start_defaults_to_first_scene() -> None:
    scenario = Scenario(id="s", scenes=[Scene(id="first"), Scene(id="second")])

    assert build_scene_index(scenario).start_id == "first"


def test_title_falls_back_to_id() -> None:
    index = build_scene_index(Scenario(id="s", scenes=[Scene(id="a")]))

    assert index.title_of("a") == "a"
    assert index.title_of("unknown") == "unknown"
