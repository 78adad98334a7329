"""
quadindex Viewer
Interactive demo: watch leaves split on insert and merge back on removal.
"""

import argparse
import logging
import random
import sys

import pygame

from quadindex import Point, QuadTree, Rectangle

# --- Configuration ---
WIDTH, HEIGHT = 800, 800
FPS = 60
TITLE = "quadindex Viewer"

REMOVE_RADIUS = 8.0
SCATTER_COUNT = 50

# Colors
BG_COLOR = (26, 26, 46)
HUD_COLOR = (200, 200, 220)
LEAF_COLOR = (70, 70, 110)
POINT_COLOR = (0, 255, 255)
HIT_COLOR = (255, 160, 0)
QUERY_COLOR = (255, 0, 200)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="quadindex Viewer - quadtree visual demo")
    p.add_argument("--threshold", type=int, default=4, help="Split threshold (default: 4)")
    p.add_argument("--max-depth", type=int, default=None, help="Subdivision depth cap")
    p.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    p.add_argument("--verbose", action="store_true", help="Log splits and merges")
    return p.parse_args()


def scatter(tree: QuadTree[int], rng: random.Random, count: int, next_id: int) -> int:
    for _ in range(count):
        tree.insert(Point(rng.uniform(0, WIDTH), rng.uniform(0, HEIGHT)), next_id)
        next_id += 1
    return next_id


def remove_near(tree: QuadTree[int], x: float, y: float) -> int:
    hits = tree.query(Point(x, y), REMOVE_RADIUS)
    for entry in hits:
        tree.remove(entry.point)
    return len(hits)


def main():
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    rng = random.Random(args.seed)
    tree: QuadTree[int] = QuadTree(
        args.threshold, Rectangle(0, 0, WIDTH, HEIGHT), max_depth=args.max_depth
    )
    next_id = scatter(tree, rng, SCATTER_COUNT, 0)

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)

    query_radius = 60.0
    circle_mode = True
    running = True

    while running:
        pg_clock.tick(FPS)

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_TAB:
                    circle_mode = not circle_mode
                elif event.key == pygame.K_r:
                    next_id = scatter(tree, rng, SCATTER_COUNT, next_id)
                elif event.key == pygame.K_c:
                    for entry in list(tree):
                        tree.remove(entry.point)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                mx, my = event.pos
                if event.button == 1:
                    tree.insert(Point(float(mx), float(my)), next_id)
                    next_id += 1
                elif event.button == 3:
                    remove_near(tree, float(mx), float(my))
                elif event.button == 4:
                    query_radius = min(query_radius + 5.0, WIDTH / 2)
                elif event.button == 5:
                    query_radius = max(query_radius - 5.0, 5.0)

        # --- Query under cursor ---
        mx, my = pygame.mouse.get_pos()
        if circle_mode:
            hits = tree.query(Point(float(mx), float(my)), query_radius)
        else:
            hits = tree.query(
                Point(mx - query_radius, my - query_radius),
                query_radius * 2,
                query_radius * 2,
            )
        hit_points = {entry.point for entry in hits}

        # --- Draw ---
        screen.fill(BG_COLOR)

        for leaf in tree.leaves():
            b = leaf.boundary
            rect = pygame.Rect(int(b.x), int(b.y), int(b.width) + 1, int(b.height) + 1)
            pygame.draw.rect(screen, LEAF_COLOR, rect, 1)

        for entry in tree:
            color = HIT_COLOR if entry.point in hit_points else POINT_COLOR
            pygame.draw.circle(screen, color, (int(entry.point.x), int(entry.point.y)), 3)

        if circle_mode:
            pygame.draw.circle(screen, QUERY_COLOR, (mx, my), int(query_radius), 1)
        else:
            size = int(query_radius * 2)
            rect = pygame.Rect(int(mx - query_radius), int(my - query_radius), size, size)
            pygame.draw.rect(screen, QUERY_COLOR, rect, 1)

        # --- HUD ---
        shape_str = "circle" if circle_mode else "rect"
        hud_lines = [
            f"Points: {len(tree)}   Leaves: {len(tree.leaves())}   Depth: {tree.depth()}"
            f"   Hits: {len(hits)} ({shape_str})",
            "LClick=Insert  RClick=Remove  Wheel=Size  Tab=Shape  R=Scatter  C=Clear  Esc=Quit",
        ]
        for i, line in enumerate(hud_lines):
            surf = font.render(line, True, HUD_COLOR)
            screen.blit(surf, (10, 8 + i * 20))

        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
