"""
The "make parallel" command, independent of any host UI.

The host supplies three collaborators:

- ``pick(prompt) -> Element``: interactive selection; raises
  ``SelectionCancelledError`` when the user aborts
- ``rotate(element, axis, angle)``: applies the rotation to host geometry;
  any exception means the host rejected it
- a ``Transaction`` (start / commit / rollback) around the mutation

Dialog wording and button registration stay on the host side; the command
returns a ``CommandResult`` whose message the host shows as-is.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from make_parallel.analysis.direction import DirectionExtractor
from make_parallel.analysis.parallel import ParallelRotationCalculator, RotationInstruction, to_degrees
from make_parallel.errors import (
    RotationApplicationError,
    SelectionCancelledError,
    UnsupportedElementError,
)
from make_parallel.geometry.vectors import Line
from make_parallel.logging_config import LogContext, log_timing
from make_parallel.model.document import Document
from make_parallel.model.elements import Element

logger = logging.getLogger(__name__)

TRANSACTION_NAME = "Make Parallel"

REFERENCE_PROMPT = "Pick reference element (first element)"
TARGET_PROMPT = "Pick target element (element to rotate)"

SUPPORTED_ELEMENTS_HINT = (
    "Supported elements: Grids, Reference Planes, Lines, Family Instances, "
    "MEP elements (pipes, ducts, cable trays, conduits), and Section views."
)

Picker = Callable[[str], Optional[Element]]
Rotator = Callable[[Element, Line, float], None]


class CommandStatus(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class CommandResult:
    status: CommandStatus
    message: str = ""
    instruction: Optional[RotationInstruction] = None
    rotated_element: Optional[Element] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.status is CommandStatus.SUCCEEDED


class Transaction:
    """Host transaction protocol."""

    name: str = TRANSACTION_NAME

    def start(self) -> None:
        pass

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass


class NullTransaction(Transaction):
    """Used when the host manages its own transaction boundary."""


class MakeParallelCommand:
    """Rotates a picked target element parallel to a picked reference."""

    def __init__(self, document: Document, tolerance_rad: Optional[float] = None):
        self.document = document
        self.extractor = DirectionExtractor(document)
        self.calculator = ParallelRotationCalculator(document, tolerance_rad=tolerance_rad)

    def execute(
        self,
        pick: Picker,
        rotate: Rotator,
        transaction: Optional[Transaction] = None,
    ) -> CommandResult:
        """Run the full pick -> resolve -> compute -> rotate flow."""
        try:
            reference = pick(REFERENCE_PROMPT)
            if reference is None:
                return self._failed("Failed to get reference element.")
            target = pick(TARGET_PROMPT)
            if target is None:
                return self._failed("Failed to get target element.")
        except SelectionCancelledError:
            logger.info("Selection cancelled")
            return CommandResult(CommandStatus.CANCELLED, "Selection cancelled.")

        with LogContext(reference_id=reference.id, target_id=target.id):
            with log_timing(logger, "Make parallel"):
                return self.run(reference, target, rotate, transaction or NullTransaction())

    def run(
        self,
        reference: Element,
        target: Element,
        rotate: Rotator,
        transaction: Transaction,
    ) -> CommandResult:
        """Align ``target`` with ``reference`` once both are known."""
        try:
            direction1, direction2 = self._resolve_directions(reference, target)
        except UnsupportedElementError as exc:
            logger.warning("Unsupported element(s): %s", ", ".join(exc.type_names))
            return CommandResult(
                CommandStatus.FAILED,
                "Cannot determine direction for one or both selected elements "
                f"({', '.join(exc.type_names)}).\n\n{SUPPORTED_ELEMENTS_HINT}",
                error=exc,
            )

        instruction = self.calculator.compute_rotation(direction1, direction2, target)
        if instruction.is_parallel:
            logger.info("Elements %d and %d are already parallel", reference.id, target.id)
            return CommandResult(CommandStatus.SUCCEEDED, "Elements are already parallel!", instruction)

        element_to_rotate = self._element_to_rotate(target)
        return self._apply(element_to_rotate, instruction, rotate, transaction)

    def _resolve_directions(self, reference: Element, target: Element):
        direction1 = self.extractor.get_direction(reference)
        direction2 = self.extractor.get_direction(target)
        unsupported: List[str] = []
        if direction1 is None:
            unsupported.append(reference.type_name)
        if direction2 is None:
            unsupported.append(target.type_name)
        if unsupported:
            raise UnsupportedElementError(unsupported)
        return direction1, direction2

    def _element_to_rotate(self, target: Element) -> Element:
        if self.extractor.is_elevation_derived(target):
            marker = self.extractor.resolve_elevation_marker_owner(target)
            if marker is not None:
                logger.info("Rotating elevation marker %d instead of %r", marker.id, target)
                return marker
        return target

    def _apply(
        self,
        element: Element,
        instruction: RotationInstruction,
        rotate: Rotator,
        transaction: Transaction,
    ) -> CommandResult:
        transaction.start()
        if element.location is None:
            transaction.rollback()
            logger.warning("%r has no location, rolled back", element)
            return self._failed("Cannot rotate this element - no location property.")

        try:
            rotate(element, instruction.axis, instruction.angle)
        except Exception as exc:
            transaction.rollback()
            error = RotationApplicationError(str(exc), element_id=element.id)
            logger.warning("Rotation of %r rejected: %s", element, exc)
            return CommandResult(
                CommandStatus.FAILED,
                f"Could not rotate element: {exc}\n\nElement may be constrained or locked.",
                instruction,
                element,
                error,
            )

        transaction.commit()
        degrees = abs(to_degrees(instruction.angle))
        logger.info("Rotated %r by %.3f°", element, degrees)
        return CommandResult(
            CommandStatus.SUCCEEDED,
            f"Elements made parallel.\nRotation: {degrees:.1f}°",
            instruction,
            element,
        )

    @staticmethod
    def _failed(message: str) -> CommandResult:
        logger.warning(message)
        return CommandResult(CommandStatus.FAILED, message)
