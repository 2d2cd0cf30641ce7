"""Fleet operators.

This module exports the remote profile deletion operator.
"""

from profsweep.operators.profiles import ProfileOperator

__all__ = ["ProfileOperator"]
