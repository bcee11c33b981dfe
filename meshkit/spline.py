"""Keyframe tracks: stepped booleans, slerped rotations and grouped tracks."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from bisect import bisect_left, bisect_right, insort
from dataclasses import dataclass
from typing import Any, Generic, Iterator, Optional, TypeVar, Union

from .vecmath import Vec3

T = TypeVar("T")


@dataclass(frozen=True)
class Quat:
    """A quaternion ``x*i + y*j + z*k + w``; the default is the identity rotation."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def __iter__(self) -> Iterator[float]:
        yield from (self.x, self.y, self.z, self.w)

    @classmethod
    def from_axis_angle(cls, axis: Vec3, degrees: float) -> Quat:
        half = math.radians(degrees) / 2.0
        a = axis.unit() * math.sin(half)
        return cls(a.x, a.y, a.z, math.cos(half))

    def __add__(self, other: Quat) -> Quat:
        return Quat(self.x + other.x, self.y + other.y, self.z + other.z, self.w + other.w)

    def __sub__(self, other: Quat) -> Quat:
        return Quat(self.x - other.x, self.y - other.y, self.z - other.z, self.w - other.w)

    def __neg__(self) -> Quat:
        return Quat(-self.x, -self.y, -self.z, -self.w)

    def __mul__(self, other: Union[Quat, float]) -> Quat:
        if isinstance(other, Quat):
            return Quat(
                self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
                self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
                self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
                self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
            )
        return Quat(self.x * other, self.y * other, self.z * other, self.w * other)

    def __rmul__(self, scale: float) -> Quat:
        return self * scale

    def dot(self, other: Quat) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z + self.w * other.w

    def norm(self) -> float:
        return math.sqrt(self.dot(self))

    def unit(self) -> Quat:
        return self * (1.0 / self.norm())

    def rotate(self, v: Vec3) -> Vec3:
        """Apply the rotation to a vector."""
        q = Vec3(self.x, self.y, self.z)
        t = 2.0 * q.cross(v)
        return v + self.w * t + q.cross(t)


def slerp(a: Quat, b: Quat, t: float) -> Quat:
    """Spherical linear interpolation along the shorter arc from ``a`` to ``b``."""
    a = a.unit()
    b = b.unit()
    cos = a.dot(b)
    if cos < 0.0:
        b = -b
        cos = -cos
    if cos > 0.9995:
        return (a + (b - a) * t).unit()
    theta = math.acos(cos)
    s = math.sin(theta)
    return a * (math.sin((1.0 - t) * theta) / s) + b * (math.sin(t * theta) / s)


class KeyframeTrack(ABC, Generic[T]):
    """Values keyed by time; subclasses decide how to evaluate between keys."""

    def __init__(self) -> None:
        self._points: dict[float, T] = {}
        self._times: list[float] = []

    def set(self, time: float, value: T) -> None:
        """Set the value at ``time``, adding a key if needed."""
        if time not in self._points:
            insort(self._times, time)
        self._points[time] = value

    def erase(self, time: float) -> None:
        """Remove the key at exactly ``time``, if there is one."""
        if time in self._points:
            del self._points[time]
            self._times.pop(bisect_left(self._times, time))

    def has(self, time: float) -> bool:
        return time in self._points

    def any(self) -> bool:
        return bool(self._times)

    def clear(self) -> None:
        self._points.clear()
        self._times.clear()

    def crop(self, time: float) -> None:
        """Remove every key at or after ``time``."""
        cut = bisect_left(self._times, time)
        for t in self._times[cut:]:
            del self._points[t]
        del self._times[cut:]

    def keys(self) -> list[float]:
        """Key times in ascending order."""
        return list(self._times)

    def __call__(self, time: float) -> T:
        return self.at(time)

    @abstractmethod
    def at(self, time: float) -> T:
        """Evaluate the track at ``time``."""

    def _bracket(self, time: float) -> tuple[T, Optional[float], Optional[T]]:
        """Value before ``time``, plus the fraction to and value of the next key.

        The fraction is None when ``time`` lies outside the keyed range or there
        is a single key.  Must not be called on an empty track.
        """
        times = self._times
        first = self._points[times[0]]
        if len(times) == 1 or times[0] > time:
            return first, None, None
        idx = bisect_right(times, time)
        if idx == len(times):
            return self._points[times[-1]], None, None
        k1, k2 = times[idx - 1], times[idx]
        return self._points[k1], (time - k1) / (k2 - k1), self._points[k2]


class StepSpline(KeyframeTrack[bool]):
    """Holds each key's value until the next key; False when there are no keys."""

    def at(self, time: float) -> bool:
        if not self._times:
            return False
        value, _, _ = self._bracket(time)
        return value


class QuatSpline(KeyframeTrack[Quat]):
    """Rotations slerped between keys; identity when there are no keys."""

    def at(self, time: float) -> Quat:
        if not self._times:
            return Quat()
        before, fraction, after = self._bracket(time)
        if fraction is None:
            return before
        return slerp(before, after, fraction)


class SplineSet:
    """Several tracks keyed together and evaluated as a tuple."""

    def __init__(self, *args: KeyframeTrack) -> None:
        if not args:
            raise ValueError("a spline set needs at least one track")
        self.tracks: tuple[KeyframeTrack, ...] = tuple(args)

    def set(self, time: float, *args: Any) -> None:
        """Set one value per track at ``time``."""
        if len(args) != len(self.tracks):
            raise ValueError(f"expected {len(self.tracks)} values, got {len(args)}")
        for track, value in zip(self.tracks, args):
            track.set(time, value)

    def erase(self, time: float) -> None:
        for track in self.tracks:
            track.erase(time)

    def any(self) -> bool:
        return any(track.any() for track in self.tracks)

    def has(self, time: float) -> bool:
        return any(track.has(time) for track in self.tracks)

    def clear(self) -> None:
        for track in self.tracks:
            track.clear()

    def crop(self, time: float) -> None:
        for track in self.tracks:
            track.crop(time)

    def keys(self) -> list[float]:
        """Union of all tracks' key times, ascending."""
        return sorted({t for track in self.tracks for t in track.keys()})

    def at(self, time: float) -> tuple:
        return tuple(track.at(time) for track in self.tracks)