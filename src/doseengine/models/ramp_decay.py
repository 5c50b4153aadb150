# src/doseengine/models/ramp_decay.py
import numpy as np


def ramp_then_decay(elapsed_days, amount_mg, compound):
    """
    Concentration left by one dose, `elapsed_days` after it was taken.

    Three phases:
      elapsed < 0                 : 0 (not taken yet)
      0 <= elapsed < peak_delay   : A*F * elapsed / peak_delay (linear rise)
      elapsed >= peak_delay       : A*F * 0.5 ** ((elapsed - peak_delay) / t_half)

    Parameters:
      elapsed_days : days since administration, scalar or array (real valued)
      amount_mg    : dose size(s), broadcast against elapsed_days
      compound     : Compound with half_life_days, bioavailability, peak_delay_days
    """
    elapsed = np.asarray(elapsed_days, dtype=float)
    peak_level = np.asarray(amount_mg, dtype=float) * compound.bioavailability

    since_peak = elapsed - compound.peak_delay_days
    # clip so days long before a dose cannot overflow 0.5 ** negative
    decay = np.power(0.5, np.maximum(since_peak, 0.0) / compound.half_life_days)

    if compound.peak_delay_days > 0:
        ramp = np.clip(elapsed / compound.peak_delay_days, 0.0, 1.0)
    else:
        ramp = np.ones_like(elapsed)

    profile = np.where(since_peak >= 0, decay, ramp)
    return np.where(elapsed < 0, 0.0, peak_level * profile)
