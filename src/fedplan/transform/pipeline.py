import logging
from typing import Optional, Sequence

from fedplan.scenario.generic_scenario import GenericScenario
from fedplan.transform.transform_base import (
    OP_APPLY,
    OP_VALIDATE,
    ScenarioTransform,
    TransformError,
)

logger = logging.getLogger(__name__)

PIPELINE_NAME: str = "pipeline"


def apply_transforms(
    base: Optional[GenericScenario],
    transforms: Sequence[Optional[ScenarioTransform]],
) -> GenericScenario:
    """
    Apply transforms in order, each one receiving the previous output.

    Every transform is validated against the current (possibly already
    transformed) scenario before it is applied. The first failure aborts
    the chain; no partially transformed scenario is ever returned. The
    caller's ``base`` is never modified, and the result is always a new
    object, even for an empty transform list.

    Args:
        base: Scenario to start from.
        transforms: Ordered transforms.

    Returns:
        GenericScenario: independent transformed scenario.

    Raises:
        TransformError: on a missing base, a ``None`` entry, or any
        validation/application failure.
    """
    if base is None:
        raise TransformError(PIPELINE_NAME, OP_APPLY, "base scenario cannot be None")

    if not transforms:
        return base.deep_copy()

    current = base

    for i, transform in enumerate(transforms):
        if transform is None:
            raise TransformError(PIPELINE_NAME, OP_APPLY, f"transform at index {i} is None")

        try:
            transform.validate(current)
        except Exception as err:
            raise TransformError(
                transform.name, OP_VALIDATE, f"validation failed at step {i}", cause=err
            ) from err

        try:
            current = transform.apply(current)
        except Exception as err:
            raise TransformError(
                transform.name, OP_APPLY, f"application failed at step {i}", cause=err
            ) from err

        logger.debug("Applied transform %s: %s", transform.name, transform.description())

    return current
