"""
Rate limiting helpers for smoothed engine quantities.

Provides:
- seek: move a value toward a target at bounded, asymmetric rates
- clamp: bound a value to a closed interval
"""


def seek(current: float, target: float, accel: float, decel: float, dt: float) -> float:
    """
    Advance a value toward a target without overshooting.

    Parameters:
    -----------
    current : float
        Present value
    target : float
        Desired value
    accel : float
        Rate, per second, at which the value may increase
    decel : float
        Rate, per second, at which the value may decrease
    dt : float
        Time step (seconds)

    Returns:
    --------
    value : float
        New value, between current and target inclusive
    """
    # Negative rates and time steps cannot move the value
    dt = max(dt, 0.0)
    if current > target:
        return max(current - max(decel, 0.0) * dt, target)
    if current < target:
        return min(current + max(accel, 0.0) * dt, target)
    return current


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound value to [lower, upper]."""
    return min(max(value, lower), upper)
