#!/usr/bin/env python3
"""Basic usage example demonstrating core jsonize functionality.

This example shows how to:
1. Describe plain classes and dataclasses for (de)serialization
2. Register subtypes so a "class" tag selects them on decode
3. Load a dict of entities from a JSON file
4. Write the entities back, tags included, and read them again

Run this example with:
    python examples/basic_usage.py
"""

import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Annotated

from jsonize import (
    Jsonize,
    JsonizeIn,
    jsonizable,
    jsonize,
    read_json,
    register_class_tag,
    write_json,
)

ENTITIES_JSON = """
{
  "player": {
    "position": {"x": 5, "y": 40},
    "components": [
      {
        "class": "Sprite",
        "texture_name": "person",
        "depth": 1,
        "texture_region": {"x": 0, "y": 0, "w": 32, "h": 32}
      },
      {"class": "Animator", "frame_time": "0.033", "repeat": "loop"}
    ]
  },
  "tree": {
    "position": {"x": 100, "y": 12},
    "components": [{"class": "Sprite", "texture_name": "oak", "depth": 2}]
  }
}
"""


@dataclass
class Vector:
    x: int
    y: int


@dataclass
class Rect:
    x: int
    y: int
    w: int
    h: int


@jsonizable
class Component(ABC):
    """Base class of every component; the concrete type is chosen by the "class" tag."""

    @property
    @jsonize("class", JsonizeIn.NO)
    def tag(self) -> str:
        # output only; on input the tag is consumed by class-tag dispatch
        return type(self).__name__

    @abstractmethod
    def describe(self) -> str: ...


@register_class_tag("Sprite")
@jsonizable
class Sprite(Component):
    texture_name: str = ""
    depth: int = 0
    texture_region: Annotated[Rect | None, jsonize(Jsonize.OPT)] = None

    def describe(self) -> str:
        return f"Sprite '{self.texture_name}' at depth {self.depth}, region {self.texture_region}"


@register_class_tag("Animator")
@jsonizable
class Animator(Component):
    class Repeat(Enum):
        no = 0
        loop = 1
        reverse = 2

    frame_time: float = 0.0
    repeat: Repeat = Repeat.no

    def describe(self) -> str:
        return f"Animator every {self.frame_time}s, repeat={self.repeat.name}"


@dataclass
class Entity:
    position: Vector
    components: list[Component] = field(default_factory=list)


def main():
    work_dir = Path(tempfile.mkdtemp(prefix="jsonize_example_"))
    source = work_dir / "entities.json"
    source.write_text(ENTITIES_JSON, encoding="utf-8")

    print(f"Reading {source}")
    entities = read_json(source, dict[str, Entity])

    player = entities["player"]
    assert player.position == Vector(5, 40)
    for component in player.components:
        print(f"  player: {component.describe()}")
        if isinstance(component, Animator):
            assert abs(component.frame_time - 0.033) < 1e-9
            assert component.repeat is Animator.Repeat.loop
        elif isinstance(component, Sprite):
            assert component.texture_region == Rect(0, 0, 32, 32)

    copy = work_dir / "entities_copy.json"
    write_json(copy, entities)
    print(f"Wrote {copy}:")
    print(copy.read_text(encoding="utf-8"))

    reloaded = read_json(copy, dict[str, Entity])
    assert [type(c) for c in reloaded["player"].components] == [Sprite, Animator]
    assert reloaded["tree"].components[0].texture_region is None
    print("Round trip preserved every component type.")


if __name__ == "__main__":
    main()
