"""Pattern selection state and the session that drives it.

The selected pattern and its loaded shape always travel together in one
frozen ``SelectionState``. Every selection bumps ``generation``; a shape fetch
remembers the generation it was issued for and its result is only committed
while that generation is still current.
"""

import logging
from dataclasses import dataclass, replace

from .exceptions import CarrisRouteError, InvalidResponseError, ValidationError
from .models import LineDetails, Pattern, Shape, TrajectoryFile
from .resolver import RouteResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    """Snapshot of the current pattern selection."""

    generation: int = 0
    pattern: Pattern | None = None
    shape: Shape | None = None
    error: str | None = None


def select_pattern(state: SelectionState, pattern: Pattern) -> SelectionState:
    return SelectionState(generation=state.generation + 1, pattern=pattern)


def clear_selection(state: SelectionState) -> SelectionState:
    return SelectionState(generation=state.generation + 1)


def commit_shape(state: SelectionState, generation: int, shape: Shape) -> SelectionState:
    """Store a fetched shape if it still matches the current selection."""
    if generation != state.generation or state.pattern is None:
        return state
    if shape.shape_id != state.pattern.shape_id:
        return state
    return replace(state, shape=shape, error=None)


def commit_error(state: SelectionState, generation: int, message: str) -> SelectionState:
    if generation != state.generation:
        return state
    return replace(state, shape=None, error=message)


class RouteSession:
    """Keeps the searched line, its patterns and the current selection."""

    def __init__(self, resolver: RouteResolver):
        self.resolver = resolver
        self.line: LineDetails | None = None
        self.patterns: list[Pattern] = []
        self.state = SelectionState()

    async def search(self, line_id: str) -> LineDetails:
        """Look up a line and all of its patterns, dropping any selection.

        The resolved patterns are kept in ``patterns``.

        Raises:
            ValidationError: If the line identifier is empty
            NotFoundError: If the line does not exist
            PatternLoadError: If any pattern could not be loaded
        """
        self.line = None
        self.patterns = []
        self.state = clear_selection(self.state)

        line = await self.resolver.resolve_line(line_id)
        patterns = await self.resolver.resolve_patterns(line.short_name, line.patterns)
        self.line = line
        self.patterns = patterns
        return line

    def get_pattern(self, pattern_id: str) -> Pattern:
        for pattern in self.patterns:
            if pattern.id == pattern_id:
                return pattern
        raise ValidationError(f"Pattern '{pattern_id}' is not part of the current line")

    async def select(self, pattern_id: str) -> Shape | None:
        """Select a pattern and load its shape.

        Returns:
            The loaded shape, or None when another pattern was selected
            while the fetch was in flight

        Raises:
            ValidationError: If the pattern is not part of the current line
            NotFoundError: If the shape of the still-selected pattern is missing
            InvalidResponseError: If the API answers with another pattern's shape
        """
        pattern = self.get_pattern(pattern_id)
        self.state = select_pattern(self.state, pattern)
        generation = self.state.generation

        try:
            shape = await self.resolver.resolve_shape(pattern.shape_id)
        except CarrisRouteError as e:
            if generation != self.state.generation:
                logger.debug(f"Discarding failed shape fetch for stale pattern {pattern_id}: {e}")
                return None
            self.state = commit_error(self.state, generation, str(e))
            raise

        if generation != self.state.generation:
            logger.debug(f"Discarding shape {shape.shape_id} for stale pattern {pattern_id}")
            return None

        if shape.shape_id != pattern.shape_id:
            error = InvalidResponseError(
                f"Expected shape '{pattern.shape_id}' for pattern '{pattern_id}', got '{shape.shape_id}'"
            )
            self.state = commit_error(self.state, generation, str(error))
            raise error

        self.state = commit_shape(self.state, generation, shape)
        return shape

    def export(self, creator: str | None = None) -> TrajectoryFile:
        """Build the GPX export for the selected pattern.

        Raises:
            ValidationError: If no pattern is selected or its shape is not loaded
            InvalidGeometryError: If the shape has no usable coordinates
        """
        from ..export.gpx import build_trajectory_file

        state = self.state
        if self.line is None or state.pattern is None or state.shape is None:
            raise ValidationError("No pattern selected or shape not loaded")
        return build_trajectory_file(self.line, state.pattern, state.shape, creator=creator)
