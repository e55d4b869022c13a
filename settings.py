# settings.py

# Frame clock
FPS = 60
TITLE = "Arena Waves"

# Phase durations (frames at 60fps)
WAVE_INTRO_FRAMES = 360        # 6 seconds
WAVE_CLEAR_FRAMES = 270        # 4.5 seconds
BOSS_INTRO_FRAMES = 540        # 9 seconds
BOSS_RETREAT_FRAMES = 60       # 1 second retreat animation
BOSS_DEFEATED_FRAMES = 180     # 3 seconds
ARENA_TRANSITION_FRAMES = 60   # 1 second

# Wave clear speed bonus: full bonus well under this, nothing past it
SPEED_BONUS_WINDOW_SECONDS = 30
SPEED_BONUS_PER_SECOND = 10

# Offline XP simulator defaults
DEFAULT_SIM_SAMPLES = 250
DEFAULT_SIM_SEED = 1337
