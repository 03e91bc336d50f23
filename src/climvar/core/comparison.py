"""Compare simulated variables with observations."""

import numpy

from climvar.core import numerical
from climvar.core import variable


def _check_compatible(sim: variable.Var, obs: variable.Var) -> None:
    if not variable.arecompatible(sim, obs):
        raise variable.IncompatibleVariablesError(
            "Cannot compare simulation and observation with different"
            " dimensions, dimension metadata, or units"
        ) from None


def bias(sim: variable.Var, obs: variable.Var) -> variable.Var:
    """Compute the bias field of `sim` with respect to `obs`.

    The result is ``sim - obs``, with the NaN-aware mean of the difference
    over all dimensions stored in the 'global_bias' attribute.

    Raises
    ------
    IncompatibleVariablesError
        The variables are not compatible (see `~variable.arecompatible`).
    """
    _check_compatible(sim, obs)
    difference = sim - obs
    attributes = dict(difference.attributes)
    attributes['global_bias'] = float(numerical.nanmean(difference.data))
    attributes['short_name'] = 'sim-obs'
    attributes['long_name'] = 'SIM - OBS'
    if sim.long_name:
        attributes['long_name'] = f"Bias of {sim.long_name} (SIM - OBS)"
    return difference._copy_with(attributes=attributes)


def global_rmse(sim: variable.Var, obs: variable.Var) -> float:
    """Compute the NaN-aware root-mean-square difference of two variables.

    Raises
    ------
    IncompatibleVariablesError
        The variables are not compatible (see `~variable.arecompatible`).
    """
    _check_compatible(sim, obs)
    difference = (sim - obs).data
    return float(numpy.sqrt(numerical.nanmean(difference ** 2)))
