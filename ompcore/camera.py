"""A first-person camera driven by keyboard and mouse input."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto

from ompcore.json_parser import JsonParser

Vec3 = tuple[float, float, float]
Matrix4 = tuple[tuple[float, float, float, float], ...]

_YAW = 0.0
_PITCH = 0.0
_SPEED = 20.0
_SENSITIVITY = 0.1
_ZOOM = 45.0
_PITCH_LIMIT = 89.0

_ZERO: Vec3 = (0.0, 0.0, 0.0)


def _vec(values: Iterable[float]) -> Vec3:
    x, y, z = (float(v) for v in values)
    return (x, y, z)


def _add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _scale(v: Vec3, factor: float) -> Vec3:
    return (v[0] * factor, v[1] * factor, v[2] * factor)


def _dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalize(v: Vec3) -> Vec3:
    length = math.sqrt(_dot(v, v))
    if length == 0.0:
        raise ValueError("cannot normalise a zero-length vector")
    return _scale(v, 1.0 / length)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(float(value), low), high)


class CameraMovement(Enum):
    FORWARD = auto()
    BACK = auto()
    RIGHT = auto()
    LEFT = auto()
    UP = auto()
    DOWN = auto()


@dataclass
class InputData:
    """Input gathered between two calls to Camera.apply_inputs."""

    input_vector: Vec3 = field(default=_ZERO)
    yaw: float = 0.0
    pitch: float = 0.0

    def reset(self) -> None:
        self.input_vector = _ZERO
        self.yaw = 0.0
        self.pitch = 0.0


_VECTOR_KEYS = (
    ("camerapos", "position"),
    ("front", "front"),
    ("up", "up"),
    ("right", "right"),
    ("worldup", "world_up"),
)
_SCALAR_KEYS = (
    ("yaw", "yaw"),
    ("pitch", "pitch"),
    ("view_angle", "_view_angle"),
    ("near_clipping", "_near_clipping"),
    ("far_clipping", "_far_clipping"),
)


class Camera:
    """A camera oriented by yaw and pitch in degrees."""

    def __init__(
        self,
        position: Iterable[float] = (0.0, 0.0, 0.0),
        up: Iterable[float] = (0.0, 1.0, 0.0),
        yaw: float = _YAW,
        pitch: float = _PITCH,
    ) -> None:
        self.position: Vec3 = _vec(position)
        self.up: Vec3 = _vec(up)
        self.world_up: Vec3 = self.up
        self.yaw = float(yaw)
        self.pitch = float(pitch)
        self.front: Vec3 = (0.0, 0.0, -1.0)
        self.right: Vec3 = _ZERO
        self.zoom = _ZOOM
        self.input = InputData()
        self._speed = _SPEED
        self._sensitivity = _SENSITIVITY
        self._view_angle = 60.0
        self._near_clipping = 0.1
        self._far_clipping = 1000.0
        self._update_camera_vectors()

    @property
    def speed(self) -> float:
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        self._speed = _clamp(value, 10.0, 200.0)

    @property
    def sensitivity(self) -> float:
        return self._sensitivity

    @sensitivity.setter
    def sensitivity(self, value: float) -> None:
        self._sensitivity = _clamp(value, 0.05, 0.5)

    @property
    def view_angle(self) -> float:
        return self._view_angle

    @view_angle.setter
    def view_angle(self, value: float) -> None:
        self._view_angle = _clamp(value, 45.0, 180.0)

    @property
    def near_clipping(self) -> float:
        return self._near_clipping

    @near_clipping.setter
    def near_clipping(self, value: float) -> None:
        self._near_clipping = _clamp(value, 0.01, 1.0)

    @property
    def far_clipping(self) -> float:
        return self._far_clipping

    @far_clipping.setter
    def far_clipping(self, value: float) -> None:
        self._far_clipping = _clamp(value, 2.0, 10000.0)

    def view_matrix(self) -> Matrix4:
        """The right-handed look-at matrix, as four rows."""
        eye = self.position
        f = _normalize(_sub(_add(eye, self.front), eye))
        s = _normalize(_cross(f, self.up))
        u = _cross(s, f)
        return (
            (s[0], s[1], s[2], -_dot(s, eye)),
            (u[0], u[1], u[2], -_dot(u, eye)),
            (-f[0], -f[1], -f[2], _dot(f, eye)),
            (0.0, 0.0, 0.0, 1.0),
        )

    def process_keyboard(self, direction: CameraMovement) -> None:
        offsets = {
            CameraMovement.FORWARD: self.front,
            CameraMovement.BACK: _scale(self.front, -1.0),
            CameraMovement.LEFT: _scale(self.right, -1.0),
            CameraMovement.RIGHT: self.right,
            CameraMovement.UP: self.up,
            CameraMovement.DOWN: _scale(self.up, -1.0),
        }
        self.input.input_vector = _add(self.input.input_vector, offsets[direction])

    def process_mouse_movement(
        self, x_offset: float, y_offset: float, constrain_pitch: bool = True
    ) -> None:
        self.input.yaw += x_offset * self._sensitivity
        self.input.pitch += y_offset * self._sensitivity
        if constrain_pitch:
            self.pitch = _clamp(self.pitch, -_PITCH_LIMIT, _PITCH_LIMIT)

    def process_mouse_scroll(self, y_offset: float) -> None:
        """Scrolling does not affect this camera."""

    def apply_inputs(self, delta_time: float) -> None:
        """Apply gathered rotation and movement, then clear the input."""
        self.yaw += self.input.yaw
        self.pitch += self.input.pitch
        self._update_camera_vectors()
        direction = self.input.input_vector
        if direction != _ZERO:
            direction = _normalize(direction)
        self.position = _add(self.position, _scale(direction, delta_time * self._speed))
        self.input.reset()

    def on_scene_save(self, parser: JsonParser) -> None:
        for prefix, attribute in _VECTOR_KEYS:
            for axis, component in zip("xyz", getattr(self, attribute)):
                parser.write_value(f"{prefix}_{axis}", component)
        for key, attribute in _SCALAR_KEYS:
            parser.write_value(key, getattr(self, attribute))

    def on_scene_load(self, parser: JsonParser) -> None:
        """Restore the state written by on_scene_save; KeyError if a member is missing."""

        def read(key: str) -> float:
            value = parser.read_value(key)
            if value is None:
                raise KeyError(key)
            return float(value)

        for prefix, attribute in _VECTOR_KEYS:
            setattr(self, attribute, tuple(read(f"{prefix}_{axis}") for axis in "xyz"))
        for key, attribute in _SCALAR_KEYS:
            setattr(self, attribute, read(key))

    def class_name(self) -> str:
        return "Camera"

    def _update_camera_vectors(self) -> None:
        yaw = math.radians(self.yaw)
        pitch = math.radians(self.pitch)
        front = (
            math.cos(yaw) * math.cos(pitch),
            math.sin(pitch),
            math.sin(yaw) * math.cos(pitch),
        )
        self.front = _normalize(front)
        self.right = _normalize(_cross(self.front, self.world_up))
        self.up = _normalize(_cross(self.right, self.front))