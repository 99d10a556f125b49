GRID_WIDTH = 8
GRID_LENGTH = 8

# Minimum run length that counts as a match along any line.
MIN_MATCH_LENGTH = 3

# Score values per cascade step, before the combo multiplier is applied.
MATCH_POINTS = 10
WILDCARD_BONUS_POINTS = 20
ROCKET_BONUS_POINTS = 50
# Each cascade level beyond the first adds this much to the multiplier.
COMBO_STEP = 0.1

# Generation retry caps. Exceeding any of them keeps the last attempt.
MAX_REFILL_ATTEMPTS = 100
MAX_BOARD_ATTEMPTS = 1000
MAX_CASCADES = 100

# Stage thresholds and chances used by StageRandomProfile.for_stage.
DEFAULT_SYMBOL_COUNT = 6
WILDCARD_CHANCE = 0.1
ROCKET_CHANCE = 0.01
ROCK_CHANCE = 0.05
WILDCARD_FROM_STAGE = 3
ROCKET_FROM_STAGE = 6
ROCK_FROM_STAGE = 9
