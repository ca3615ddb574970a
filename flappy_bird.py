import logging
import os

import pygame

from highscore import HighScoreStore
from simulation import (
    BIRD_HEIGHT,
    BIRD_WIDTH,
    BIRD_X,
    OBSTACLE_WIDTH,
    PLAYFIELD_HEIGHT,
    PLAYFIELD_WIDTH,
    TICK_MS,
    GameLoop,
    clamp,
)

log = logging.getLogger(__name__)

# ---------- Config ----------
WIDTH, HEIGHT = PLAYFIELD_WIDTH, PLAYFIELD_HEIGHT
FPS = 60                # render rate; the simulation runs on its own 20 ms timer
TICK_EVENT = pygame.USEREVENT + 1

SPRITE_SIZE = 40
SPRITE_FILE = os.environ.get(
    "FLAPPY_BIRD_SPRITE",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "bird.png"),
)

SKY = (135, 206, 235)
PIPE_COLOR = (32, 160, 32)
TEXT = (20, 20, 20)
WHITE = (255, 255, 255)

# body colours; the first one is the default
SKINS = {
    "yellow": (255, 205, 60),
    "blue": (80, 150, 255),
    "red": (230, 70, 60),
}
SKIN_NAMES = list(SKINS)

SWATCH_SIZE = 30
SWATCH_Y = HEIGHT // 2 + 50
RESTART_BUTTON = pygame.Rect(WIDTH // 2 - 60, HEIGHT // 2 + 30, 120, 40)
# ----------------------------


def skin_swatches():
    """(name, rect) for each skin button on the start screen."""
    step = SWATCH_SIZE + 10
    left = WIDTH // 2 - (step * len(SKIN_NAMES) - 10) // 2
    return [(name, pygame.Rect(left + i * step, SWATCH_Y, SWATCH_SIZE, SWATCH_SIZE))
            for i, name in enumerate(SKIN_NAMES)]


# ---------- Input ----------
def handle_event(event, game, skin):
    """Apply one input event to the game.

    Space and a left click on the play surface both mean jump. Before the
    first jump a click on a swatch picks a skin instead, and after game over
    a click on the button restarts. Returns ``(running, skin)``.
    """
    if event.type == pygame.QUIT:
        return False, skin
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False, skin
        if event.key == pygame.K_SPACE:
            game.jump()
    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        state = game.state
        if state.over:
            if RESTART_BUTTON.collidepoint(event.pos):
                game.restart()
            return True, skin
        if not state.started:
            for name, rect in skin_swatches():
                if rect.collidepoint(event.pos):
                    return True, name
        game.jump()
    return True, skin


class TickTimer:
    """Periodic TICK_EVENT source, armed only while a session is active."""

    def __init__(self):
        self.armed = False

    def sync(self, active):
        if active and not self.armed:
            pygame.time.set_timer(TICK_EVENT, TICK_MS)
            self.armed = True
        elif not active and self.armed:
            pygame.time.set_timer(TICK_EVENT, 0)
            self.armed = False


# ---------- Visuals ----------
def make_bird_body(color):
    # procedural stand-in for the sprite image
    r = SPRITE_SIZE // 2 - 3
    s = pygame.Surface((SPRITE_SIZE, SPRITE_SIZE), pygame.SRCALPHA)
    c = SPRITE_SIZE // 2
    pygame.draw.circle(s, color, (c, c), r)
    # beak
    pygame.draw.polygon(s, (255, 120, 20), [(c + r - 2, c - 5), (c + r + 3, c), (c + r - 2, c + 5)])
    # eye
    pygame.draw.circle(s, (20, 20, 20), (c + 6, c - 6), 3)
    return s


def load_bird_sprites(path=SPRITE_FILE):
    """One surface per skin, tinted from the sprite image when there is one."""
    if not os.path.exists(path):
        log.info("no sprite at %s, drawing the bird instead", path)
        return {name: make_bird_body(color) for name, color in SKINS.items()}
    base = pygame.transform.smoothscale(pygame.image.load(path).convert_alpha(), (SPRITE_SIZE, SPRITE_SIZE))
    sprites = {}
    for name, color in SKINS.items():
        img = base.copy()
        if name != SKIN_NAMES[0]:
            img.fill((*color, 255), special_flags=pygame.BLEND_RGBA_MULT)
        sprites[name] = img
    return sprites


def draw_obstacle(surf, o):
    top = pygame.Rect(int(o.x), 0, OBSTACLE_WIDTH, int(o.gap_top))
    bottom_y = int(o.gap_bottom)
    bottom = pygame.Rect(int(o.x), bottom_y, OBSTACLE_WIDTH, HEIGHT - bottom_y)
    for rect in (top, bottom):
        pygame.draw.rect(surf, PIPE_COLOR, rect)
        # shadow on one side
        shade = pygame.Rect(rect.right - 6, rect.top, 6, rect.height)
        pygame.draw.rect(surf, (20, 110, 20), shade)


class GameView:
    def __init__(self, screen, sprites=None):
        self.screen = screen
        self.font_big = pygame.font.SysFont("arial", 40, bold=True)
        self.font_med = pygame.font.SysFont("arial", 24)
        self.font_small = pygame.font.SysFont("arial", 18)
        self.sprites = sprites or load_bird_sprites()

    def draw(self, state, skin):
        screen = self.screen
        screen.fill(SKY)

        for o in state.obstacles:
            draw_obstacle(screen, o)

        # bird, tilted by vertical speed
        angle = clamp(-state.bird_velocity * 3.5, -80, 30)
        rotated = pygame.transform.rotate(self.sprites[skin], angle)
        center = (BIRD_X + BIRD_WIDTH // 2, int(state.bird_y) + BIRD_HEIGHT // 2)
        screen.blit(rotated, rotated.get_rect(center=center).topleft)

        # HUD
        screen.blit(self.font_med.render(f"Score: {state.score}", True, TEXT), (10, 10))
        hs = self.font_med.render(f"High Score: {state.high_score}", True, TEXT)
        screen.blit(hs, (WIDTH - hs.get_width() - 10, 10))

        if not state.started and not state.over:
            self._draw_start(skin)
        if state.over:
            self._draw_game_over(state.score)

    def _blit_centered(self, surf, y):
        self.screen.blit(surf, (WIDTH // 2 - surf.get_width() // 2, y))

    def _draw_start(self, skin):
        self._blit_centered(self.font_big.render("Flappy Bird", True, TEXT), HEIGHT // 2 - 90)
        self._blit_centered(self.font_small.render("Click or press Space to start and jump", True, TEXT), HEIGHT // 2 - 30)
        self._blit_centered(self.font_small.render("Select your bird:", True, TEXT), HEIGHT // 2 + 15)
        for name, rect in skin_swatches():
            pygame.draw.ellipse(self.screen, SKINS[name], rect)
            if name == skin:
                pygame.draw.ellipse(self.screen, TEXT, rect, 2)

    def _draw_game_over(self, score):
        overlay = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 120))
        self.screen.blit(overlay, (0, 0))

        self._blit_centered(self.font_big.render("Game Over", True, (255, 200, 200)), HEIGHT // 2 - 90)
        self._blit_centered(self.font_med.render(f"Your score: {score}", True, WHITE), HEIGHT // 2 - 30)
        pygame.draw.rect(self.screen, WHITE, RESTART_BUTTON, border_radius=6)
        label = self.font_med.render("Restart", True, TEXT)
        self.screen.blit(label, label.get_rect(center=RESTART_BUTTON.center))


# ---------- Main Game ----------
def run_game(store=None):
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Flappy Bird")
    clock = pygame.time.Clock()

    game = GameLoop(store or HighScoreStore())
    view = GameView(screen)
    timer = TickTimer()
    skin = SKIN_NAMES[0]
    running = True

    while running:
        clock.tick(FPS)
        for event in pygame.event.get():
            if event.type == TICK_EVENT:
                game.tick()
            else:
                running, skin = handle_event(event, game, skin)
                if not running:
                    break
            timer.sync(game.state.active)

        view.draw(game.state, skin)
        pygame.display.flip()

    timer.sync(False)
    pygame.quit()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_game()


if __name__ == "__main__":
    main()
