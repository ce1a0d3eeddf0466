# MIT License (see LICENSE)
"""
Adapters to the external projectile-motion subsystem.

The orchestrator hands its decision to whatever moves projectiles in the
host simulation through this interface: a relaunch after a ricochet, or
destruction after fragmentation. Penetration needs no call.

Concrete adapters:
    - RecordingMotion: buffers commands for inspection or replay.
    - DebugMotion: writes commands as text to a stream.
    - NullMotion: discards everything.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TextIO
import sys

from .types import RelaunchCommand


class ProjectileMotionAdapter(ABC):
    """
    Abstract base class for the host's projectile launcher.

    Subclasses forward to the host engine's launch entry point.
    """

    @abstractmethod
    def launch(self, command: RelaunchCommand) -> None:
        """
        Relaunch the projectile from the impact point.

        Args:
            command: New origin, angle, heading, height and speed.
        """
        ...

    @abstractmethod
    def destroy(self) -> None:
        """Remove the projectile (it broke up on impact)."""
        ...


class RecordingMotion(ProjectileMotionAdapter):
    """
    Adapter that records every instruction it receives.

    Example:
        motion = RecordingMotion()
        orchestrator = ImpactOrchestrator(motion, catalog)
        orchestrator.on_impact(event, rng)
        print(motion.launches, motion.destroyed)
    """

    def __init__(self):
        self.launches: list[RelaunchCommand] = []
        self.destroyed: int = 0

    def launch(self, command: RelaunchCommand) -> None:
        self.launches.append(command)

    def destroy(self) -> None:
        self.destroyed += 1

    @property
    def calls(self) -> int:
        return len(self.launches) + self.destroyed

    def clear(self) -> None:
        self.launches.clear()
        self.destroyed = 0


class DebugMotion(ProjectileMotionAdapter):
    """
    Text adapter for development.

    Output:
        launch @ (12.40, 7.95) h=0.00 angle=0.035 rad heading=268.2° v=371.5
        destroy
    """

    def __init__(self, output: TextIO | None = None):
        self.output = output or sys.stdout

    def launch(self, command: RelaunchCommand) -> None:
        x, z = command.origin
        self.output.write(
            f"launch @ ({x:.2f}, {z:.2f}) h={command.height:.2f} "
            f"angle={command.angle:.3f} rad heading={command.heading:.1f}° v={command.speed:.1f}\n"
        )

    def destroy(self) -> None:
        self.output.write("destroy\n")


class NullMotion(ProjectileMotionAdapter):
    """No-op adapter, for benchmarks."""

    def launch(self, command: RelaunchCommand) -> None:
        pass

    def destroy(self) -> None:
        pass
