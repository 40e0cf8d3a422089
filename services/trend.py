"""Least-squares trend fitting over yearly aggregates."""

from __future__ import annotations

from typing import Sequence

from models.records import TrendModel


class TrendFitter:
    """Fits ``value ≈ slope * index + intercept`` by ordinary least squares.

    Points are ``(i, values[i])`` for ``i = 0..n-1``; the x axis is the
    position in the series, not the calendar year. The closed form is exact,
    so there is no iteration or convergence to worry about.
    """

    min_points = 2

    def fit(self, values: Sequence[float]) -> TrendModel:
        n = len(values)
        if n < self.min_points:
            return TrendModel.zero()

        sum_x = 0.0
        sum_y = 0.0
        sum_xy = 0.0
        sum_x2 = 0.0
        for index, value in enumerate(values):
            sum_x += index
            sum_y += value
            sum_xy += index * value
            sum_x2 += index * index

        # Only zero for n < 2, which is handled above.
        denominator = n * sum_x2 - sum_x * sum_x
        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n
        return TrendModel(slope=slope, intercept=intercept)
