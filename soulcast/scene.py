"""Scene contents: background layers and a fixed table of objects."""

from __future__ import annotations

from dataclasses import dataclass, field

from .sprite import Image

BACKGROUND_LAYER_COUNT = 8
OBJECT_COUNT = 512


@dataclass
class SceneObject:
    """An object placed in the scene, drawn with an image tile."""

    x: int = 0
    y: int = 0
    priority: int = 0
    hflip: bool = False
    vflip: bool = False
    tile: Image | None = None


@dataclass
class BackgroundLayer:
    """A scrolling background layer."""

    position: tuple[int, int] = (0, 0)


class Scene:
    """The background layers and the object table."""

    def __init__(self) -> None:
        self.background_layers = [BackgroundLayer() for _ in range(BACKGROUND_LAYER_COUNT)]
        self.objects = [SceneObject() for _ in range(OBJECT_COUNT)]

    def render_objects(self) -> list[SceneObject]:
        """Objects that have a tile, in drawing order.

        Lower priority comes first; objects of equal priority keep their
        order in the table.
        """
        visible = (obj for obj in self.objects if obj.tile is not None)
        return sorted(visible, key=lambda obj: obj.priority)