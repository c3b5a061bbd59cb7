"""Map rendering: projecting capitals onto a canvas and the pulsing marker.

Capitals carry their position in pixels of the reference map image. The
canvas can have any size; each axis is scaled on its own, so a canvas with a
different aspect ratio stretches the map rather than letterboxing it.

A canvas is anything with ``width``/``height`` attributes and the methods
``clear()``, ``draw_image(source)`` and
``draw_circle(x, y, radius, fill=None, stroke=None, line_width=1.0)``.
``PlotlyCanvas`` is the one the Streamlit app uses.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import plotly.graph_objects as go

from quiz_dataset import GeoEntity, MapDimensions
from quiz_scheduler import RepeatingTask, Scheduler
from quiz_session import QuizSession, QuizState, SessionEvent

logger = logging.getLogger(__name__)

# ---------- Marker style ----------
MARKER_COLOR = "#3b82f6"
MARKER_RADIUS = 6
OUTLINE_COLOR = "#ffffff"
HIGHLIGHT_RGB = (16, 185, 129)

# ---------- Pulse animation ----------
PULSE_START = 12.0
PULSE_MIN = 10.0
PULSE_MAX = 16.0
PULSE_STEP = 0.15
TICKS_PER_FRAME = 2
RIPPLE_PERIOD = 100
RIPPLE_BASE_RADIUS = 20.0


def rgba(rgb: Tuple[int, int, int], alpha: float) -> str:
    r, g, b = rgb
    return f"rgba({r}, {g}, {b}, {round(max(0.0, min(1.0, alpha)), 3)})"


def project(
    position: Tuple[float, float],
    map_dimensions: MapDimensions,
    width: float,
    height: float,
) -> Tuple[float, float]:
    """Map a reference-image pixel position onto a width x height canvas."""
    x, y = position
    return x * (width / map_dimensions.width), y * (height / map_dimensions.height)


@dataclass
class AnimationState:
    radius: float = PULSE_START
    growing: bool = True
    opacity: float = 1.0
    ticks: int = 0

    def step(self) -> None:
        """Advance one frame: triangle-wave radius, sine opacity, ripple clock."""
        if self.growing:
            self.radius += PULSE_STEP
            if self.radius >= PULSE_MAX:
                self.growing = False
        else:
            self.radius -= PULSE_STEP
            if self.radius <= PULSE_MIN:
                self.growing = True
        self.opacity = 0.7 + math.sin(self.ticks * 0.05) * 0.3
        self.ticks += TICKS_PER_FRAME

    @property
    def ripple_phase(self) -> int:
        return self.ticks % RIPPLE_PERIOD

    @property
    def ripple_radius(self) -> float:
        return RIPPLE_BASE_RADIUS + self.ripple_phase * 0.5

    @property
    def ripple_opacity(self) -> float:
        return max(0.0, 1.0 - self.ripple_phase / RIPPLE_PERIOD)

    @property
    def glow(self) -> float:
        return 15 + (self.radius - PULSE_START) * 2


# ---------- Canvas ----------
class PlotlyCanvas:
    """Records drawing calls and turns them into a Plotly figure.

    The y axis points down like an HTML canvas, so reference-image pixel
    coordinates can be used directly.
    """

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self._image: Optional[str] = None
        self._shapes: List[Dict] = []

    def clear(self) -> None:
        self._image = None
        self._shapes = []

    def draw_image(self, source: str) -> None:
        self._image = source

    def draw_circle(
        self,
        x: float,
        y: float,
        radius: float,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        line_width: float = 1.0,
    ) -> None:
        self._shapes.append(dict(
            type="circle",
            xref="x",
            yref="y",
            x0=x - radius,
            y0=y - radius,
            x1=x + radius,
            y1=y + radius,
            fillcolor=fill or "rgba(0, 0, 0, 0)",
            line=dict(color=stroke or "rgba(0, 0, 0, 0)", width=line_width if stroke else 0),
        ))

    @property
    def shapes(self) -> List[Dict]:
        return list(self._shapes)

    def figure(self) -> go.Figure:
        fig = go.Figure()
        if self._image:
            fig.add_layout_image(dict(
                source=self._image,
                xref="x",
                yref="y",
                x=0,
                y=0,
                sizex=self.width,
                sizey=self.height,
                sizing="stretch",
                layer="below",
            ))
        fig.update_xaxes(range=[0, self.width], visible=False, fixedrange=True)
        fig.update_yaxes(range=[self.height, 0], visible=False, fixedrange=True)
        fig.update_layout(
            shapes=self._shapes,
            width=self.width,
            height=self.height,
            margin=dict(l=0, r=0, t=0, b=0),
            paper_bgcolor="#F1F5F9",
            plot_bgcolor="#F1F5F9",
            showlegend=False,
        )
        return fig


# ---------- Renderer ----------
class MapRenderer:
    """Draws all capitals and animates the active one while a question is open."""

    def __init__(
        self,
        map_dimensions: MapDimensions,
        capitals,
        canvas,
        scheduler: Scheduler,
        image: Optional[str] = None,
    ):
        self.map_dimensions = map_dimensions
        self.capitals: Tuple[GeoEntity, ...] = tuple(capitals)
        self.canvas = canvas
        self.image = image
        self.active_id: Optional[str] = None
        self.animation = AnimationState()
        self.frames_drawn = 0
        self._task = RepeatingTask(scheduler, self._on_frame, name="marker-pulse")

    @property
    def animating(self) -> bool:
        return self._task.running

    def bind(self, session: QuizSession) -> None:
        """Follow a session: animate while it presents a question."""
        session.add_listener(self.on_session_event)
        if session.state is QuizState.PRESENTING:
            self.show(session.data.active_id, animate=True)
        else:
            self.show(session.data.active_id, animate=False)

    def on_session_event(self, session: QuizSession, event: SessionEvent) -> None:
        if event.state is QuizState.PRESENTING:
            if event.entity_changed or event.previous is not QuizState.PRESENTING:
                self.show(session.data.active_id, animate=True)
        elif event.previous is QuizState.PRESENTING or event.state is QuizState.CLOSED:
            self.stop()

    def show(self, capital_id: Optional[str], animate: bool = True) -> None:
        """Switch the highlighted capital, restarting the pulse from scratch."""
        self._task.stop()
        self.active_id = capital_id
        self.animation = AnimationState()
        self.draw()
        if animate:
            self._task.start()

    def stop(self) -> None:
        """Stop animating and leave a static frame on the canvas."""
        self._task.stop()
        self.draw()

    def _on_frame(self, now: float) -> None:
        self.animation.step()
        self.draw()

    def draw(self) -> None:
        canvas = self.canvas
        canvas.clear()
        if self.image:
            canvas.draw_image(self.image)

        width, height = canvas.width, canvas.height
        active: Optional[Tuple[float, float]] = None
        for capital in self.capitals:
            if not capital.on_map:
                continue
            x, y = project(capital.map_position, self.map_dimensions, width, height)
            if capital.id == self.active_id:
                active = (x, y)
                continue
            canvas.draw_circle(x, y, MARKER_RADIUS, fill=MARKER_COLOR, stroke=OUTLINE_COLOR, line_width=2)

        if active is not None:
            self._draw_highlight(*active)
        self.frames_drawn += 1

    def _draw_highlight(self, x: float, y: float) -> None:
        pulse = self.animation
        canvas = self.canvas
        # Soft glow standing in for a canvas shadow blur
        canvas.draw_circle(x, y, pulse.radius + pulse.glow / 2, fill=rgba(HIGHLIGHT_RGB, 0.2))
        canvas.draw_circle(
            x, y, pulse.radius, fill=rgba(HIGHLIGHT_RGB, pulse.opacity), stroke=OUTLINE_COLOR, line_width=3
        )
        canvas.draw_circle(x, y, pulse.radius * 0.6, fill=OUTLINE_COLOR)
        canvas.draw_circle(
            x, y, pulse.ripple_radius, stroke=rgba(HIGHLIGHT_RGB, pulse.ripple_opacity * 0.5), line_width=2
        )
