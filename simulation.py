import logging
import random

log = logging.getLogger(__name__)

# ---------- Config ----------
PLAYFIELD_WIDTH, PLAYFIELD_HEIGHT = 800, 500
TICK_MS = 20            # one simulation step every 20 ms (~50 Hz)

BIRD_X = 50             # bird's fixed left edge
BIRD_WIDTH = 30
BIRD_HEIGHT = 30
GRAVITY = 0.45          # added to velocity every tick
JUMP_IMPULSE = -7       # velocity set on jump

OBSTACLE_WIDTH = 50
SCROLL_SPEED = 3
SPAWN_DISTANCE = 200    # newest obstacle must be this far in before the next one
GAP_MARGIN = 50         # keep gaps away from the top and bottom edges
INITIAL_GAP = 200
MIN_GAP = 100
GAP_SHRINK_EVERY = 10   # gap shrinks by 1 every this many points
# ----------------------------


def clamp(v, a, b): return max(a, min(b, v))


def gap_for_score(score):
    return max(MIN_GAP, INITIAL_GAP - score // GAP_SHRINK_EVERY)


class Obstacle:
    def __init__(self, x, gap_top, gap_size):
        self.x = x
        self.gap_top = gap_top
        self.gap_size = gap_size

    @property
    def gap_bottom(self):
        return self.gap_top + self.gap_size

    def overlaps(self, left, right):
        return self.x < right and self.x + OBSTACLE_WIDTH > left

    def __repr__(self):
        return f"Obstacle(x={self.x}, gap_top={self.gap_top:.1f}, gap_size={self.gap_size})"


class SimulationState:
    """Everything the game knows about one session.

    Mutated only by GameLoop; the presentation layer reads it and nothing else.
    """

    def __init__(self, high_score=0):
        self.bird_y = PLAYFIELD_HEIGHT / 2
        self.bird_velocity = 0.0
        self.obstacles = []
        self.score = 0
        self.high_score = high_score
        self.started = False
        self.over = False

    @property
    def active(self):
        return self.started and not self.over


class GameLoop:
    """Owns one session's state and advances it one tick at a time.

    ``store`` is anything with ``load()`` and ``save(value)``; ``rng`` is a
    ``random.Random`` used for gap placement.
    """

    def __init__(self, store=None, rng=None):
        self.store = store
        self.rng = rng or random.Random()
        high = store.load() if store is not None else 0
        self._state = SimulationState(high_score=high)

    @property
    def state(self):
        return self._state

    def jump(self):
        s = self._state
        if s.over:
            return
        s.bird_velocity = JUMP_IMPULSE
        if not s.started:
            s.started = True
            log.info("session started")

    def tick(self):
        s = self._state
        if not s.active:
            return

        # collisions are judged against where the bird was when the tick began
        prev_y = s.bird_y

        # physics
        s.bird_y = clamp(s.bird_y + s.bird_velocity, 0, PLAYFIELD_HEIGHT - BIRD_HEIGHT)
        s.bird_velocity += GRAVITY

        # scroll, then spawn based on the sequence as it stood before scrolling
        newest_x = s.obstacles[-1].x if s.obstacles else None
        obstacles = []
        for o in s.obstacles:
            o.x -= SCROLL_SPEED
            if o.x > -OBSTACLE_WIDTH:
                obstacles.append(o)
        if newest_x is None or newest_x < PLAYFIELD_WIDTH - SPAWN_DISTANCE:
            obstacles.append(self._spawn(s.score))
        s.obstacles = obstacles

        s.score += 1

        if prev_y <= 0 or prev_y >= PLAYFIELD_HEIGHT - BIRD_HEIGHT:
            s.over = True
        for o in s.obstacles:
            if self._hits(o, prev_y):
                s.over = True

        if s.over:
            log.info("game over at score %d", s.score)

    def restart(self):
        s = self._state
        high = max(s.score, s.high_score)
        if self.store is not None:
            self.store.save(high)
        log.info("restart: high score %d", high)
        self._state = SimulationState(high_score=high)

    def _spawn(self, score):
        top = self.rng.uniform(GAP_MARGIN, PLAYFIELD_HEIGHT - INITIAL_GAP - GAP_MARGIN)
        return Obstacle(PLAYFIELD_WIDTH, top, gap_for_score(score))

    def _hits(self, o, y):
        if not o.overlaps(BIRD_X, BIRD_X + BIRD_WIDTH):
            return False
        return y < o.gap_top or y + BIRD_HEIGHT > o.gap_bottom
