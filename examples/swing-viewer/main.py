"""
tick-swing Viewer
Side view of a tire swing: mount a rider, let it swing, watch it settle.
"""

import logging
import math
import sys

import numpy as np
import pygame

from tick_swing import (
    DisplayWorld,
    Fulcrum,
    Hitbox,
    ModelPart,
    SwingController,
    SwingGeometry,
    SwingConfig,
    TickScheduler,
    Transformation,
)
from tick_swing.signals import AreaLoaded, Interact, RiderDismounted

# --- Configuration ---
WIDTH, HEIGHT = 800, 600
CONFIG = SwingConfig()
TPS = round(1 / CONFIG.time_step)
TITLE = "tick-swing Viewer"
PIXELS_PER_METER = 120.0
ORIGIN_PX = (WIDTH // 2, 140)

BG_COLOR = (26, 26, 46)
HUD_COLOR = (200, 200, 220)
COLORS = {
    "frame": (120, 90, 60),
    "rope": (220, 200, 150),
    "tire": (40, 40, 40),
    "player": (0, 255, 200),
    "oak_fence": (160, 120, 80),
}
OUTLINE_COLOR = (255, 255, 255)

LOCATION = (0.5, 70.0, 0.5)


def build_geometry() -> SwingGeometry:
    rope = tuple(
        ModelPart("rope", Transformation(translation=(0.0, -0.25 * (i + 1), 0.0)))
        for i in range(6)
    )
    tire = tuple(
        ModelPart(
            "tire",
            Transformation(
                translation=(0.0, 0.35 * math.sin(a), 0.35 * math.cos(a)),
            ),
        )
        for a in np.linspace(0.0, 2 * math.pi, 10, endpoint=False)
    )
    return SwingGeometry(
        location=LOCATION,
        still=(
            ModelPart("frame", Transformation(translation=(0.0, 0.1, -0.8))),
            ModelPart("frame", Transformation(translation=(0.0, 0.1, 0.8))),
        ),
        rope=rope,
        rotating=tire,
        interaction=Hitbox(position=(0.5, 68.0, 0.5), width=1.0, height=1.2),
        fulcrum=Fulcrum(position=LOCATION, block="oak_fence", radius=1.9),
    )


def to_screen(point: tuple[float, float, float]) -> tuple[int, int]:
    _, y, z = point
    sx = ORIGIN_PX[0] + (z - LOCATION[2]) * PIXELS_PER_METER
    sy = ORIGIN_PX[1] - (y - LOCATION[1]) * PIXELS_PER_METER
    return int(sx), int(sy)


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)

    # --- Swing setup ---
    world = DisplayWorld()
    scheduler = TickScheduler(CONFIG)
    controller = SwingController(world, scheduler, build_geometry(), CONFIG)
    controller.install()
    controller.spawn()

    def on_dismount(w, parent, child):
        if w.is_valid(child) and w.get(child).kind == "player":
            controller.bus.publish(RiderDismounted(child))

    world.on_dismount(on_dismount)
    rider = world.create("player", np.identity(4), (0.5, 67.0, 3.0))

    running = True
    while running:
        pg_clock.tick(TPS)

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    controller.bus.publish(Interact(rider, controller.interaction))
                elif event.key == pygame.K_d and controller.primary is not None:
                    world.detach(controller.primary, rider)
                elif event.key == pygame.K_x:
                    rope = controller.groups[0]
                    if len(rope):
                        world.remove(rope.handles[-1])
                elif event.key == pygame.K_r:
                    controller.bus.publish(AreaLoaded(controller.area))

        # --- Update ---
        scheduler.step()

        # --- Draw ---
        screen.fill(BG_COLOR)
        for handle in world.handles():
            display = world.get(handle)
            if display.kind == "interaction":
                w, h = display.matrix[2, 2], display.matrix[1, 1]
                x, y = to_screen(display.position)
                rect = pygame.Rect(
                    x - int(w * PIXELS_PER_METER / 2),
                    y - int(h * PIXELS_PER_METER),
                    int(w * PIXELS_PER_METER),
                    int(h * PIXELS_PER_METER),
                )
                pygame.draw.rect(screen, OUTLINE_COLOR, rect, 1)
                continue
            color = COLORS.get(display.kind, OUTLINE_COLOR)
            radius = 10 if display.kind == "player" else 6
            pygame.draw.circle(screen, color, to_screen(world.world_point(handle)), radius)

        # --- HUD ---
        phase = controller.phase
        if phase is not None:
            status = (
                f"Phase: {phase.phase.value:<13} tick: {phase.tick_count:4d}  "
                f"angle: {math.degrees(phase.angle):7.2f}  omega: {phase.angular_velocity:6.2f}"
            )
        else:
            status = "Phase: at rest"
        rider_str = "on" if controller.state.has_passenger else "off"
        hud_lines = [
            f"{status}   Rider: {rider_str}",
            "Space=Mount  D=Dismount  X=Break rope  R=Reload area  Esc=Quit",
        ]
        for i, line in enumerate(hud_lines):
            surf = font.render(line, True, HUD_COLOR)
            screen.blit(surf, (10, 8 + i * 20))

        pygame.display.flip()

    controller.shutdown()
    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
