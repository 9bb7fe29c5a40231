"""
Spawn Command (spawn)
=====================

Example host command: places primitive objects into a scene.

This is the template for host-supplied commands. It shows argument
validation, parsing several related arguments, reporting parse errors
through the context, and returning structured details.

Grammar
-------
    spawn [type] [x y z] [color]

    type    cube (box), sphere (ball), cylinder, capsule, plane, quad
            Default: cube
    x y z   Position, three numbers. Default: 0 0 0
    color   red, green, blue, yellow, purple (magenta), cyan,
            white, black, gray (grey). Default: white

Only 0, 1, 4 or 5 arguments are accepted; anything else fails
validation and prints the usage text.

Examples
--------
    spawn                      →  cube at (0, 0, 0), white
    spawn sphere               →  sphere at (0, 0, 0), white
    spawn cube 5 10 0          →  cube at (5, 10, 0), white
    spawn cylinder 0 5 0 red   →  cylinder at (0, 5, 0), red

Design: Domain Model
--------------------
    Vector3        Frozen dataclass: a position
    SpawnedObject  Frozen dataclass: what was placed, where, in what color
    Scene          The host collaborator that receives objects.
                   The in-memory version here just keeps a list.
    SpawnCommand   The Command handler, tag 1000 so a host can drop all
                   example commands with unregister_by_tag(1000).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from command_console.context import ConsoleContext
from command_console.registry import Category, Command, CommandResult

logger = logging.getLogger(__name__)

EXAMPLE_TAG = 1000


# ─── Domain Model ───────────────────────────────────────────────────

class PrimitiveType(Enum):
    CUBE = "Cube"
    SPHERE = "Sphere"
    CYLINDER = "Cylinder"
    CAPSULE = "Capsule"
    PLANE = "Plane"
    QUAD = "Quad"

    def __str__(self) -> str:
        return self.value


class Color(Enum):
    RED = (1.0, 0.0, 0.0)
    GREEN = (0.0, 1.0, 0.0)
    BLUE = (0.0, 0.0, 1.0)
    YELLOW = (1.0, 0.92, 0.016)
    MAGENTA = (1.0, 0.0, 1.0)
    CYAN = (0.0, 1.0, 1.0)
    WHITE = (1.0, 1.0, 1.0)
    BLACK = (0.0, 0.0, 0.0)
    GRAY = (0.5, 0.5, 0.5)

    def __str__(self) -> str:
        return self.name.lower()


_PRIMITIVE_ALIASES = {
    "cube": PrimitiveType.CUBE,
    "box": PrimitiveType.CUBE,
    "sphere": PrimitiveType.SPHERE,
    "ball": PrimitiveType.SPHERE,
    "cylinder": PrimitiveType.CYLINDER,
    "capsule": PrimitiveType.CAPSULE,
    "plane": PrimitiveType.PLANE,
    "quad": PrimitiveType.QUAD,
}

_COLOR_ALIASES = {
    "red": Color.RED,
    "green": Color.GREEN,
    "blue": Color.BLUE,
    "yellow": Color.YELLOW,
    "purple": Color.MAGENTA,
    "magenta": Color.MAGENTA,
    "cyan": Color.CYAN,
    "white": Color.WHITE,
    "black": Color.BLACK,
    "gray": Color.GRAY,
    "grey": Color.GRAY,
}


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g}, {self.z:g})"


@dataclass(frozen=True)
class SpawnedObject:
    """One object placed by ``spawn``.

    Attributes
    ----------
    name : str
        ``Console_<Type>_<HHMMSS>``, the way spawned objects are
        labelled in the scene.
    primitive : PrimitiveType
    position : Vector3
    color : Color
    """
    name: str
    primitive: PrimitiveType
    position: Vector3
    color: Color

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "primitive": str(self.primitive),
            "position": [self.position.x, self.position.y, self.position.z],
            "color": str(self.color),
        }


class Scene:
    """Minimal scene: an ordered list of spawned objects."""

    def __init__(self):
        self.objects: list[SpawnedObject] = []

    def add(self, obj: SpawnedObject) -> None:
        self.objects.append(obj)

    def clear(self) -> None:
        self.objects.clear()


# ─── Parsers ────────────────────────────────────────────────────────

def parse_primitive(arg: str) -> Optional[PrimitiveType]:
    return _PRIMITIVE_ALIASES.get(arg.lower())


def parse_color(arg: str) -> Optional[Color]:
    return _COLOR_ALIASES.get(arg.lower())


def parse_position(x: str, y: str, z: str) -> Optional[Vector3]:
    """Three numeric strings → Vector3, or None if any is not a number."""
    try:
        return Vector3(float(x), float(y), float(z))
    except ValueError:
        return None


# ─── Command Handler ────────────────────────────────────────────────

class SpawnCommand(Command):
    """The ``spawn`` example command.

    Parameters
    ----------
    scene : Scene, optional
        Where objects go. A private empty scene is used if omitted.
    """

    VALID_ARG_COUNTS = (0, 1, 4, 5)

    def __init__(self, scene: Optional[Scene] = None):
        self.scene = scene if scene is not None else Scene()

    @property
    def name(self) -> str:
        return "spawn"

    @property
    def description(self) -> str:
        return "Spawn primitive objects in the scene"

    @property
    def category(self) -> Category:
        return Category.DEVELOPMENT

    @property
    def tag(self) -> int:
        return EXAMPLE_TAG

    def usage(self) -> str:
        return ("Usage: spawn [type] [x y z] [color]\n"
                "  spawn                    - Create cube at origin\n"
                "  spawn sphere             - Create sphere at origin\n"
                "  spawn cube 5 10 0        - Create cube at position (5, 10, 0)\n"
                "  spawn cylinder 0 5 0 red - Create red cylinder at (0, 5, 0)\n"
                "\n"
                "Types: cube, sphere, cylinder, capsule, plane, quad\n"
                "Colors: red, green, blue, yellow, purple, cyan, white, black, gray")

    def validate(self, args: list[str]) -> bool:
        return len(args) in self.VALID_ARG_COUNTS

    def execute(self, args: list[str], context: ConsoleContext) -> CommandResult:
        primitive = PrimitiveType.CUBE
        position = Vector3()
        color = Color.WHITE

        if args:
            primitive = parse_primitive(args[0])
            if primitive is None:
                return CommandResult.failed(
                    self.name,
                    f"Unknown primitive type '{args[0]}'. "
                    f"Valid types: cube, sphere, cylinder, capsule, plane, quad"
                )

        if len(args) >= 4:
            position = parse_position(*args[1:4])
            if position is None:
                return CommandResult.failed(
                    self.name,
                    f"Invalid position coordinates: '{args[1]}', '{args[2]}', '{args[3]}'. "
                    f"Expected numbers."
                )

        if len(args) == 5:
            color = parse_color(args[4])
            if color is None:
                return CommandResult.failed(
                    self.name,
                    f"Unknown color '{args[4]}'. "
                    f"Valid colors: red, green, blue, yellow, purple, cyan, white, black, gray"
                )

        obj = SpawnedObject(
            name=f"Console_{primitive}_{datetime.now():%H%M%S}",
            primitive=primitive,
            position=position,
            color=color,
        )
        self.scene.add(obj)
        logger.debug(f"Spawned {obj}")

        return CommandResult(
            command=self.name,
            summary=f"Created {primitive} '{obj.name}' at {position} with color {color}",
            details=obj.to_dict(),
        )
