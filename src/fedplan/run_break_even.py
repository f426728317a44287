import logging
from typing import Optional

import pandas as pd

from fedplan.config.config_mapper import (
    ConfigMapper,
    KEY_BREAKEVEN,
    KEY_CONSTRAINTS,
    KEY_ENGINE,
    KEY_GOALS,
    KEY_SOLVER,
    KEY_TARGET,
)
from fedplan.evaluation.cancellation import CancellationToken
from fedplan.evaluation.evaluator_base import EvaluatorBase
from fedplan.io_handler.local_io_handler import LocalIOHandler
from fedplan.optimizer.break_even_solver import BreakEvenSolver
from fedplan.optimizer.types import MultiDimensionalResult, OptimizationTarget

logger = logging.getLogger(__name__)


def main(
    config_file_name: str,
    evaluator: EvaluatorBase,
    io_handler: Optional[LocalIOHandler] = None,
    run_id: str = "",
    cancellation: Optional[CancellationToken] = None,
) -> pd.DataFrame:
    """
    Run the break-even analysis described by a local YAML file.

    A ``target`` of ``all`` runs the multi-dimensional optimizer over the
    configured goals; any other target runs one optimization per goal.

    Args:
        config_file_name: YAML file name, resolved by the IO handler.
        evaluator: Calculation engine adapter.
        io_handler: Defaults to a LocalIOHandler reading FEDPLAN_CONFIG_FOLDER.
        run_id: Output subfolder; results are only saved if set.
        cancellation: Optional token, e.g. cancelled by a timer.

    Returns:
        pd.DataFrame: one row per optimization result.
    """
    # ----------------------------
    # Load configuration
    # ----------------------------
    io_handler = io_handler or LocalIOHandler(config_file_name=config_file_name)
    params = ConfigMapper.map_yaml_to_params(io_handler.load_config())

    solver = BreakEvenSolver(evaluator, params[KEY_SOLVER])
    breakeven = params[KEY_BREAKEVEN]

    # ----------------------------
    # Optimize
    # ----------------------------
    if breakeven[KEY_TARGET] == OptimizationTarget.ALL:
        request = ConfigMapper.build_request(params)
        md_result = solver.optimize_multi_dimensional(
            request.base_scenario,
            params[KEY_ENGINE],
            params[KEY_CONSTRAINTS],
            breakeven[KEY_GOALS],
            cancellation,
        )
        for recommendation in md_result.recommendations:
            logger.info(recommendation)
    else:
        results = [
            solver.optimize(ConfigMapper.build_request(params, goal=goal), cancellation)
            for goal in breakeven[KEY_GOALS]
        ]
        md_result = MultiDimensionalResult(results=results)

    table = md_result.to_frame()

    if run_id:
        io_handler.save_results(results=table, run_id=run_id)

    return table

