"""Fixed sizing bounds, rating range and objective weights."""

# Team sizing
MIN_TEAM_SIZE = 5
MAX_TEAM_SIZE = 8
MIN_TEAMS = 2
MIN_GENDER_PER_TEAM = 1
MIN_PLAYERS = MIN_TEAM_SIZE * MIN_TEAMS

# Ratings
MIN_RATING = 1
MAX_RATING = 10
DEFAULT_RATING = 4

# Objective weights (higher total score is better, 0 is ideal)
WEIGHT_RATING = 10
WEIGHT_GENDER = 6
WEIGHT_STRONG_PREF = 3
WEIGHT_SOFT_PREF = 1

# Independent random restarts of the hill climb
HILL_CLIMB_STARTS = 10
