"""Type definitions for the budget kernels.

Reductions over many horizontal cells lose digits quickly in single
precision, so everything is computed in double precision.
"""

import numpy as np
import taichi as ti

# Taichi floating-point type for kernel arguments
DTYPE = ti.f64

# Matching numpy dtype for field storage
NP_DTYPE = np.float64
