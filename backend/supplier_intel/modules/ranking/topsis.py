"""TOPSIS supplier ranking.

Technique for Order Preference by Similarity to an Ideal Solution:
  1. Build the N x M decision matrix (suppliers x criteria).
  2. Vector-normalize each column: r_ij = x_ij / sqrt(sum_i x_ij^2).
     A column whose norm is 0 normalizes to all zeros.
  3. Weight: v_ij = r_ij * w_j. Weights are used as given, never rescaled
     to sum to 1, so scores stay comparable with the slider percentages.
  4. Ideal / negative-ideal per column (max/min for benefit, min/max for cost).
  5. Euclidean separation from both; closeness = S- / (S+ + S-), and 0.0
     when both separations are 0 (single supplier, identical suppliers).
  6. Stable sort by closeness descending; rank = position + 1.

Pure function: inputs are never mutated.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import structlog

from supplier_intel.modules.ranking.criteria import extract_features, validate_criteria
from supplier_intel.modules.ranking.schemas import CriterionSpec, Orientation, RankedSupplier
from supplier_intel.modules.suppliers.schemas import SupplierProfile

logger = structlog.get_logger()


def decision_matrix(
    suppliers: Sequence[SupplierProfile], criteria: Sequence[CriterionSpec]
) -> np.ndarray:
    """N x M matrix of extracted criterion values."""
    rows = [extract_features(s, list(criteria)) for s in suppliers]
    return np.array(rows, dtype=float).reshape(len(suppliers), len(criteria))


def closeness_scores(
    matrix: np.ndarray,
    weights: Sequence[float],
    orientations: Sequence[Orientation],
) -> np.ndarray:
    """Relative closeness to the ideal solution for each row of ``matrix``."""
    n_rows, n_cols = matrix.shape
    if n_rows == 0:
        return np.zeros(0)
    if n_cols == 0:
        return np.zeros(n_rows)

    # Pre-scale by the column's max magnitude so squaring cannot overflow;
    # r_ij is unchanged by the common factor.
    scale = np.abs(matrix).max(axis=0)
    zero_norm = scale == 0
    scaled = matrix / np.where(zero_norm, 1.0, scale)
    norms = np.sqrt(np.sum(scaled**2, axis=0))
    normalized = np.where(zero_norm, 0.0, scaled / np.where(zero_norm, 1.0, norms))

    weighted = normalized * np.asarray(weights, dtype=float)

    is_benefit = np.array([o == Orientation.benefit for o in orientations])
    col_max = weighted.max(axis=0)
    col_min = weighted.min(axis=0)
    ideal = np.where(is_benefit, col_max, col_min)
    negative_ideal = np.where(is_benefit, col_min, col_max)

    sep_ideal = np.sqrt(np.sum((weighted - ideal) ** 2, axis=1))
    sep_negative = np.sqrt(np.sum((weighted - negative_ideal) ** 2, axis=1))

    total = sep_ideal + sep_negative
    degenerate = total == 0
    scores = np.where(degenerate, 0.0, sep_negative / np.where(degenerate, 1.0, total))
    return np.clip(scores, 0.0, 1.0)


def rank_suppliers(
    suppliers: Sequence[SupplierProfile],
    criteria: Sequence[CriterionSpec],
) -> list[RankedSupplier]:
    """Rank suppliers by TOPSIS closeness (1 = best).

    Ties keep input order. Raises ``UnknownCriterionError`` /
    ``InvalidWeightError`` before computing anything when the criteria are
    misconfigured.
    """
    criteria = validate_criteria(criteria)
    if not suppliers:
        return []

    matrix = decision_matrix(suppliers, criteria)
    scores = closeness_scores(
        matrix,
        weights=[c.weight for c in criteria],
        orientations=[c.orientation for c in criteria],
    )

    # sorted() is stable, so equal scores keep their input order
    order = sorted(range(len(suppliers)), key=lambda i: -scores[i])

    ranked = []
    for position, i in enumerate(order):
        data = suppliers[i].model_dump(by_alias=False)
        data["score"] = float(scores[i])
        data["rank"] = position + 1
        ranked.append(RankedSupplier.model_validate(data))

    logger.debug(
        "TOPSIS ranking computed",
        suppliers=len(ranked),
        criteria=[c.name for c in criteria],
        top=ranked[0].company_name,
    )
    return ranked


def score_band(score: float) -> str:
    """Display band for a closeness score."""
    if score >= 0.8:
        return "excellent"
    if score >= 0.6:
        return "good"
    if score >= 0.4:
        return "fair"
    return "poor"
