"""StoryCompass: scene-graph validation and compass score distributions."""

__version__ = "0.1.0"
