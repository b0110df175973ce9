import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame
import pygame.gfxdraw
import logging
import math
import os
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from venn_deduction.cards import Card, Color, Region, Shape, Size, build_catalog, draw_answers, region_matches

logger = logging.getLogger(__name__)


class VennDeductionEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array", "human"]}

    # Must be a short, user-facing control string:
    user_guide = (
        "Controls: drag a shape with the mouse (or ↑↓←→ and hold Space) and drop it on a circle or an answer box."
    )

    # Must be a short, user-facing description of the game:
    game_description = (
        "Venn deduction: each circle hides a card. Drop shapes where you think they belong and "
        "learn the hidden rules from the green and red feedback."
    )

    # Should frames auto-advance or wait for user input?
    auto_advance = False

    # --- Constants ---
    SCREEN_WIDTH = 800
    SCREEN_HEIGHT = 600
    FPS = 60
    CURSOR_SPEED = 10

    CIRCLE_RADIUS = 150
    LEFT_CENTER = (310, 280)
    RIGHT_CENTER = (490, 280)
    INTERSECTION_CENTER = (400, 280)
    ANSWER_BOX_SIZE = 70
    LEFT_BOX_CENTER = (200, 70)
    RIGHT_BOX_CENTER = (600, 70)

    CHOICE_RADIUS = 22
    CATALOG_COLUMNS = 9
    CATALOG_ORIGIN = (80, 480)
    CATALOG_SPACING = (80, 65)
    SHAPE_SIZES = {Size.SMALL: 8, Size.LARGE: 14}

    COLOR_BG = (245, 245, 240)
    COLOR_OUTLINE = (0, 0, 0)
    COLOR_LEFT_CIRCLE = (60, 90, 255)
    COLOR_RIGHT_CIRCLE = (255, 220, 0)
    CIRCLE_ALPHA = 40
    CIRCLE_ALPHA_HOVER = 90
    COLOR_BOX = (255, 255, 255)
    COLOR_NEUTRAL = (255, 180, 60)
    COLOR_MATCH = (120, 230, 120)
    COLOR_MISMATCH = (240, 110, 110)
    DRAG_ALPHA = 180
    COLOR_CURSOR = (40, 40, 40)
    COLOR_UI_TEXT = (60, 60, 70)
    CARD_COLORS = {
        Color.RED: (220, 40, 40),
        Color.BLUE: (40, 80, 220),
        Color.GREEN: (30, 150, 60),
    }

    def __init__(self, render_mode="rgb_array"):
        super().__init__()

        self.render_mode = render_mode

        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()
        self.font_box = pygame.font.Font(None, 56)
        self.font_ui = pygame.font.Font(None, 26)

        self.left_box = pygame.Rect(0, 0, self.ANSWER_BOX_SIZE, self.ANSWER_BOX_SIZE)
        self.left_box.center = self.LEFT_BOX_CENTER
        self.right_box = pygame.Rect(0, 0, self.ANSWER_BOX_SIZE, self.ANSWER_BOX_SIZE)
        self.right_box.center = self.RIGHT_BOX_CENTER

        self.left_answer = None
        self.right_answer = None
        self.choices = []
        self.cursor_pos = [self.SCREEN_WIDTH // 2, self.SCREEN_HEIGHT // 2]
        self.drag_index = None
        self.last_pointer_held = False
        self.steps = 0

        self.reset()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        options = options or {}

        catalog = build_catalog()
        left_answer, right_answer = draw_answers(self.np_random, catalog)
        left_answer = options.get("left_answer", left_answer)
        right_answer = options.get("right_answer", right_answer)
        for name, answer in (("left_answer", left_answer), ("right_answer", right_answer)):
            if not isinstance(answer, Card):
                raise ValueError(f"{name} must be a Card, got {answer!r}")
        self.left_answer = left_answer
        self.right_answer = right_answer

        self.choices = []
        for i, card in enumerate(catalog):
            row, col = divmod(i, self.CATALOG_COLUMNS)
            home = (
                self.CATALOG_ORIGIN[0] + col * self.CATALOG_SPACING[0],
                self.CATALOG_ORIGIN[1] + row * self.CATALOG_SPACING[1],
            )
            self.choices.append({
                'card': card,
                'home': home,
                'pos': list(home),
                'region': None,
                'matches': None,
                'dragged': False,
            })

        self.steps = 0
        self.cursor_pos = [self.SCREEN_WIDTH // 2, self.SCREEN_HEIGHT // 2]
        self.drag_index = None
        self.last_pointer_held = False

        logger.info("New puzzle with %d choices", len(self.choices))
        logger.debug("Hidden answers: left=%s right=%s", self.left_answer, self.right_answer)
        if self.left_answer == self.right_answer:
            logger.warning("Both circles hide the same card (%s); the answer boxes cannot be told apart",
                           self.left_answer)

        return self._get_observation(), self._get_info()

    def step(self, action):
        movement, pointer_held, _ = action[0], action[1] == 1, action[2] == 1

        self._move_cursor(movement)
        self._handle_pointer(pointer_held)

        self.steps += 1

        return (
            self._get_observation(),
            0.0,
            False,
            False,
            self._get_info()
        )

    def move_cursor_to(self, pos):
        """Put the pointer at `pos` (screen pixels), e.g. from a real mouse."""
        self.cursor_pos = [
            int(np.clip(pos[0], 0, self.SCREEN_WIDTH - 1)),
            int(np.clip(pos[1], 0, self.SCREEN_HEIGHT - 1)),
        ]

    def _move_cursor(self, movement):
        x, y = self.cursor_pos
        if movement == 1: y -= self.CURSOR_SPEED
        elif movement == 2: y += self.CURSOR_SPEED
        elif movement == 3: x -= self.CURSOR_SPEED
        elif movement == 4: x += self.CURSOR_SPEED
        self.move_cursor_to((x, y))

    def _handle_pointer(self, pointer_held):
        pressed = pointer_held and not self.last_pointer_held
        released = not pointer_held and self.last_pointer_held

        if pressed and self.drag_index is None:
            self._pick_up()

        if self.drag_index is not None:
            if pointer_held:
                self.choices[self.drag_index]['pos'] = list(self.cursor_pos)
            elif released:
                self._drop()

        self.last_pointer_held = pointer_held

    def _pick_up(self):
        # Topmost first: later choices are drawn over earlier ones
        for i in reversed(range(len(self.choices))):
            choice = self.choices[i]
            if self._choice_contains(choice, self.cursor_pos):
                choice['matches'] = None
                choice['dragged'] = True
                choice['pos'] = list(self.cursor_pos)
                self.drag_index = i
                logger.debug("Picked up %s", choice['card'])
                return

    def _drop(self):
        choice = self.choices[self.drag_index]
        choice['dragged'] = False
        self.drag_index = None

        region = self._region_at(choice['pos'])
        if region is None:
            choice['pos'] = list(choice['home'])
            choice['region'] = None
            choice['matches'] = None
            logger.debug("Dropped %s outside every target, back to the catalog", choice['card'])
            return

        choice['region'] = region
        choice['matches'] = region_matches(choice['card'], region, self.left_answer, self.right_answer)
        logger.debug("Dropped %s on %s: %s", choice['card'], region.value,
                     "match" if choice['matches'] else "no match")

    def _choice_contains(self, choice, point):
        return math.hypot(point[0] - choice['pos'][0], point[1] - choice['pos'][1]) < self.CHOICE_RADIUS

    def _in_circle(self, center, point):
        return math.hypot(point[0] - center[0], point[1] - center[1]) < self.CIRCLE_RADIUS

    def _region_at(self, point):
        """Drop target under `point`, or None when it misses every target."""
        pixel = (int(point[0]), int(point[1]))
        if self.left_box.collidepoint(pixel):
            return Region.LEFT_ONLY
        if self.right_box.collidepoint(pixel):
            return Region.RIGHT_ONLY

        in_left = self._in_circle(self.LEFT_CENTER, point)
        in_right = self._in_circle(self.RIGHT_CENTER, point)
        if in_left and in_right:
            return Region.INTERSECTION
        if in_left:
            return Region.LEFT_CIRCLE
        if in_right:
            return Region.RIGHT_CIRCLE
        return None

    def _get_observation(self):
        self.screen.fill(self.COLOR_BG)
        self._render_game()
        self._render_ui()
        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _get_info(self):
        placed = [c for c in self.choices if c['region'] is not None]
        return {
            "steps": self.steps,
            "placed": len(placed),
            "green": sum(1 for c in placed if c['matches'] is True),
            "red": sum(1 for c in placed if c['matches'] is False),
        }

    def _render_game(self):
        overlay = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT), pygame.SRCALPHA)
        for center, color in ((self.LEFT_CENTER, self.COLOR_LEFT_CIRCLE), (self.RIGHT_CENTER, self.COLOR_RIGHT_CIRCLE)):
            alpha = self.CIRCLE_ALPHA_HOVER if self._in_circle(center, self.cursor_pos) else self.CIRCLE_ALPHA
            pygame.gfxdraw.filled_circle(overlay, center[0], center[1], self.CIRCLE_RADIUS, color + (alpha,))
        self.screen.blit(overlay, (0, 0))
        for center in (self.LEFT_CENTER, self.RIGHT_CENTER):
            pygame.gfxdraw.aacircle(self.screen, center[0], center[1], self.CIRCLE_RADIUS, self.COLOR_OUTLINE)

        for box in (self.left_box, self.right_box):
            pygame.draw.rect(self.screen, self.COLOR_BOX, box, border_radius=6)
            pygame.draw.rect(self.screen, self.COLOR_OUTLINE, box, 2, border_radius=6)
            mark = self.font_box.render("?", True, self.COLOR_UI_TEXT)
            self.screen.blit(mark, mark.get_rect(center=box.center))

        for i, choice in enumerate(self.choices):
            if i != self.drag_index:
                self._draw_choice(self.screen, choice, choice['pos'])

        if self.drag_index is not None:
            choice = self.choices[self.drag_index]
            r = self.CHOICE_RADIUS
            ghost = pygame.Surface((2 * r + 2, 2 * r + 2), pygame.SRCALPHA)
            self._draw_choice(ghost, choice, (r + 1, r + 1))
            ghost.set_alpha(self.DRAG_ALPHA)
            self.screen.blit(ghost, (int(choice['pos'][0]) - r - 1, int(choice['pos'][1]) - r - 1))

        cx, cy = self.cursor_pos
        pygame.draw.line(self.screen, self.COLOR_CURSOR, (cx - 6, cy), (cx + 6, cy), 1)
        pygame.draw.line(self.screen, self.COLOR_CURSOR, (cx, cy - 6), (cx, cy + 6), 1)

    def _draw_choice(self, surface, choice, pos):
        x, y = int(pos[0]), int(pos[1])
        if choice['matches'] is None:
            bg = self.COLOR_NEUTRAL
        elif choice['matches']:
            bg = self.COLOR_MATCH
        else:
            bg = self.COLOR_MISMATCH
        pygame.gfxdraw.filled_circle(surface, x, y, self.CHOICE_RADIUS, bg)
        pygame.gfxdraw.aacircle(surface, x, y, self.CHOICE_RADIUS, self.COLOR_OUTLINE)

        card = choice['card']
        s = self.SHAPE_SIZES[card.size]
        fill = self.CARD_COLORS[card.color]
        if card.shape is Shape.CIRCLE:
            pygame.gfxdraw.filled_circle(surface, x, y, s, fill)
            pygame.gfxdraw.aacircle(surface, x, y, s, self.COLOR_OUTLINE)
        elif card.shape is Shape.SQUARE:
            rect = pygame.Rect(x - s, y - s, 2 * s, 2 * s)
            pygame.draw.rect(surface, fill, rect)
            pygame.draw.rect(surface, self.COLOR_OUTLINE, rect, 1)
        else:
            points = [(x, y - s), (x - s, y + s), (x + s, y + s)]
            pygame.gfxdraw.filled_polygon(surface, points, fill)
            pygame.gfxdraw.aapolygon(surface, points, self.COLOR_OUTLINE)

    def _render_ui(self):
        info = self._get_info()
        placed_surf = self.font_ui.render(f"PLACED: {info['placed']} / {len(self.choices)}", True, self.COLOR_UI_TEXT)
        self.screen.blit(placed_surf, placed_surf.get_rect(topright=(self.SCREEN_WIDTH - 20, 15)))

        for box, label in ((self.left_box, "LEFT"), (self.right_box, "RIGHT")):
            label_surf = self.font_ui.render(label, True, self.COLOR_UI_TEXT)
            self.screen.blit(label_surf, label_surf.get_rect(midtop=(box.centerx, box.bottom + 4)))

    def render(self):
        if self.render_mode == 'rgb_array':
            return self._get_observation()

    def close(self):
        pygame.font.quit()
        pygame.quit()

    def validate_implementation(self):
        logger.info("Running implementation validation...")
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8

        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)
        assert len(self.choices) == 18

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert not trunc
        assert isinstance(info, dict)

        logger.info("Implementation validated successfully")


if __name__ == "__main__":
    # Play with the real mouse in a window
    from venn_deduction.logging_config import setup_logging

    setup_logging(logging.INFO)

    # Re-initialize Pygame for a visible display
    os.environ.pop("SDL_VIDEODRIVER", None)
    pygame.quit()
    pygame.init()
    pygame.font.init()

    screen = pygame.display.set_mode((VennDeductionEnv.SCREEN_WIDTH, VennDeductionEnv.SCREEN_HEIGHT))
    pygame.display.set_caption("Venn Deduction")
    clock = pygame.time.Clock()

    env = VennDeductionEnv(render_mode="human")
    obs, info = env.reset()

    print(env.user_guide)
    print("Press 'R' to start a new puzzle.\n")

    running = True
    while running:
        movement = 0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            if event.type == pygame.MOUSEMOTION:
                env.move_cursor_to(event.pos)
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_r:
                    obs, info = env.reset()

        keys = pygame.key.get_pressed()
        if keys[pygame.K_UP]: movement = 1
        elif keys[pygame.K_DOWN]: movement = 2
        elif keys[pygame.K_LEFT]: movement = 3
        elif keys[pygame.K_RIGHT]: movement = 4

        pointer_held = 1 if pygame.mouse.get_pressed()[0] or keys[pygame.K_SPACE] else 0
        shift_held = 1 if keys[pygame.K_LSHIFT] or keys[pygame.K_RSHIFT] else 0

        obs, reward, terminated, truncated, info = env.step([movement, pointer_held, shift_held])

        frame_surface = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
        screen.blit(frame_surface, (0, 0))
        pygame.display.flip()

        clock.tick(env.FPS)

    env.close()
