"""Push/pop transition metadata for the active view."""

from dataclasses import dataclass

from chefnote.domain.navigation import Direction, View
from chefnote.domain.recipes import Recipe


@dataclass(frozen=True)
class Motion:
    """Position of a view at the start or end of a transition."""

    x: str
    opacity: float
    z_index: int


@dataclass(frozen=True)
class Spring:
    """Spring animation parameters."""

    stiffness: int = 260
    damping: int = 30


@dataclass(frozen=True)
class TransitionFrame:
    """What to mount and how to animate it."""

    key: str
    view: View
    direction: Direction
    enter: Motion
    exit: Motion
    spring: Spring | None


RESTING = Motion(x="0", opacity=1.0, z_index=1)


def mount_key(view: View, entity: Recipe | None) -> str:
    """Identity of the mounted view; a change forces a full remount."""
    return f"{view.name}:{entity.id if entity is not None else ''}"


@dataclass
class TransitionPresenter:
    """Computes enter/exit motions; never touches router or store state."""

    reduced_motion: bool = False
    spring: Spring = Spring()

    def present(
        self, view: View, direction: Direction, entity: Recipe | None = None
    ) -> TransitionFrame:
        """Describe the transition into ``view``."""
        key = mount_key(view, entity)
        if self.reduced_motion:
            return TransitionFrame(key, view, direction, RESTING, RESTING, None)
        if direction is Direction.FORWARD:
            # New view slides in from the leading edge over the receding one.
            enter = Motion(x="100%", opacity=1.0, z_index=10)
            exit_ = Motion(x="-25%", opacity=0.9, z_index=1)
        else:
            enter = Motion(x="-25%", opacity=0.9, z_index=1)
            exit_ = Motion(x="100%", opacity=1.0, z_index=10)
        return TransitionFrame(key, view, direction, enter, exit_, self.spring)
