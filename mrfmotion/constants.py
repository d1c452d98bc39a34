"""Constants for the MRF motion detector."""

STATIC = 0    # mask value of a static pixel
MOVING = 255  # mask value of a moving pixel

ORDER_1_NEIGHBOURS = 4  # first-order MRF: axis-aligned neighbours
ORDER_2_NEIGHBOURS = 8  # second-order MRF: axis-aligned + diagonal neighbours

SIGMA_RATIO = 5.0  # sigma_m / sigma_s, fixed by the model

# Defaults from the reference experiment (missa frames 1 and 50).
DEFAULT_THETA = 1.0
DEFAULT_SIGMA_S = 1.22
DEFAULT_T = 2.0
DEFAULT_ITERATIONS = 5
